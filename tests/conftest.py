from __future__ import annotations

from pathlib import Path
import sys


import pytest
from keyring.backend import KeyringBackend
from keyring.errors import KeyringError, PasswordDeleteError


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
# This avoids ModuleNotFoundError for `import persistent_value` under pytest import modes
# that don't automatically prepend the cwd/rootdir to sys.path.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from persistent_value import Backends, Settings  # noqa: E402


class MemoryKeyring(KeyringBackend):
    """In-process keyring: {(service, username): password}."""

    priority = 1

    def __init__(self) -> None:
        super().__init__()
        self.entries: dict[tuple[str, str], str] = {}

    def get_password(self, service, username):
        return self.entries.get((service, username))

    def set_password(self, service, username, password):
        self.entries[(service, username)] = password

    def delete_password(self, service, username):
        try:
            del self.entries[(service, username)]
        except KeyError:
            raise PasswordDeleteError(username) from None


class BrokenKeyring(KeyringBackend):
    priority = 1

    def get_password(self, service, username):
        raise KeyringError("locked")

    def set_password(self, service, username, password):
        raise KeyringError("locked")

    def delete_password(self, service, username):
        raise KeyringError("locked")


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """
    Settings with every path redirected under tmp_path so tests never touch the real home.
    """
    return Settings(
        app_id="com.example.app",
        keychain_service="com.example.app",
        access_group=None,
        documents_dir=tmp_path / "Documents",
        backing_file="PersistentValues",
        preferences_dir=tmp_path / "prefs",
    )


@pytest.fixture
def memory_keyring() -> MemoryKeyring:
    return MemoryKeyring()


@pytest.fixture
def backends(settings: Settings, memory_keyring: MemoryKeyring) -> Backends:
    return Backends.from_settings(settings, keyring_backend=memory_keyring)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in (
        "PERSISTENT_VALUE_APP_ID",
        "PERSISTENT_VALUE_KEYCHAIN_SERVICE",
        "PERSISTENT_VALUE_ACCESS_GROUP",
        "PERSISTENT_VALUE_DOCUMENTS_DIR",
        "PERSISTENT_VALUE_BACKING_FILE",
        "PERSISTENT_VALUE_PREFERENCES_DIR",
    ):
        # setenv first so teardown also removes values a dotenv file loads
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


@pytest.fixture
def broken_keyring() -> BrokenKeyring:
    return BrokenKeyring()


@pytest.fixture
def fresh_default_backends(clean_env: pytest.MonkeyPatch, tmp_path: Path):
    """
    Point the process defaults at tmp_path and rebuild them for this test only.
    """
    from persistent_value import default_backends

    clean_env.setenv("PERSISTENT_VALUE_DOCUMENTS_DIR", str(tmp_path / "Documents"))
    clean_env.setenv("PERSISTENT_VALUE_PREFERENCES_DIR", str(tmp_path / "prefs"))
    default_backends.cache_clear()
    yield clean_env
    default_backends.cache_clear()
