from __future__ import annotations

import dataclasses
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_BACKING_FILE = "PersistentValues"


def _env_str(name: str) -> str | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return raw.strip()


def _env_path(name: str) -> Path | None:
    raw = _env_str(name)
    return Path(raw).expanduser() if raw is not None else None


def default_app_id() -> str:
    # Closest thing a Python process has to a bundle identifier.
    stem = Path(sys.argv[0]).stem if sys.argv and sys.argv[0] else ""
    return stem or "python"


def default_documents_dir() -> Path:
    return Path.home() / "Documents"


def default_preferences_dir() -> Path:
    return Path.home() / ".config" / "persistent_value"


@dataclass(frozen=True)
class Settings:
    # Identity; also the preference document name
    app_id: str

    # Credential store namespace
    keychain_service: str
    access_group: str | None

    # File backend. documents_dir overrides the per-user documents directory,
    # e.g. to point at a directory shared with another application.
    documents_dir: Path | None
    backing_file: str

    # Preference store
    preferences_dir: Path

    @property
    def backing_file_path(self) -> Path:
        base = self.documents_dir if self.documents_dir is not None else default_documents_dir()
        return base / self.backing_file

    @property
    def preferences_path(self) -> Path:
        return self.preferences_dir / f"{self.app_id}.json"

    def replace(self, **changes) -> "Settings":
        return dataclasses.replace(self, **changes)


def get_settings(env_file: str | os.PathLike[str] | None = None) -> Settings:
    if env_file is not None:
        # Existing environment variables win over the file.
        load_dotenv(env_file, override=False)

    app_id = _env_str("PERSISTENT_VALUE_APP_ID") or default_app_id()
    keychain_service = _env_str("PERSISTENT_VALUE_KEYCHAIN_SERVICE") or app_id
    access_group = _env_str("PERSISTENT_VALUE_ACCESS_GROUP")

    documents_dir = _env_path("PERSISTENT_VALUE_DOCUMENTS_DIR")
    backing_file = _env_str("PERSISTENT_VALUE_BACKING_FILE") or DEFAULT_BACKING_FILE

    preferences_dir = _env_path("PERSISTENT_VALUE_PREFERENCES_DIR") or default_preferences_dir()

    return Settings(
        app_id=app_id,
        keychain_service=keychain_service,
        access_group=access_group,
        documents_dir=documents_dir,
        backing_file=backing_file,
        preferences_dir=preferences_dir,
    )
