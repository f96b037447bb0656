"""Configuration management for Profe."""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

PROFE_HOME = Path(os.environ.get("PROFE_HOME", Path.home() / "profe"))
CONFIG_FILE = PROFE_HOME / "config" / "profe.conf"
SESSION_FILE = PROFE_HOME / "config" / ".session.json"
CACHE_DIR = PROFE_HOME / "cache"

FILTER_CHOICES = ("from_today", "show_all")


@dataclass
class Config:
    """Profe configuration."""

    firebase_db_url: str = ""
    cache_dir: str = ""
    default_filter: str = "from_today"
    # Default class scope for the agenda; empty means all classes
    institution_id: str = ""
    institution_name: str = ""
    class_id: str = ""
    class_name: str = ""


@dataclass
class Session:
    """Signed-in user, as stored by the login step."""

    uid: str = ""
    email: str = ""
    id_token: str = ""
    refresh_token: str = ""

    def save(self) -> None:
        """Save session to file."""
        SESSION_FILE.parent.mkdir(parents=True, exist_ok=True)
        SESSION_FILE.write_text(
            json.dumps(
                {
                    "uid": self.uid,
                    "email": self.email,
                    "idToken": self.id_token,
                    "refreshToken": self.refresh_token,
                }
            )
        )
        SESSION_FILE.chmod(0o600)

    @classmethod
    def load(cls) -> "Session":
        """Load session from file."""
        if not SESSION_FILE.exists():
            return cls()
        try:
            data = json.loads(SESSION_FILE.read_text())
            return cls(
                uid=data.get("uid", ""),
                email=data.get("email", ""),
                id_token=data.get("idToken", ""),
                refresh_token=data.get("refreshToken", ""),
            )
        except (json.JSONDecodeError, AttributeError):
            return cls()


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from unquoted values."""
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from profe.conf file."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "firebase_db_url":
                config.firebase_db_url = value.rstrip("/")
            case "cache_dir":
                config.cache_dir = value
            case "default_filter":
                if value.lower() in FILTER_CHOICES:
                    config.default_filter = value.lower()
                else:
                    logger.warning(f"Unknown DEFAULT_FILTER '{value}', using {config.default_filter}")
            case "institution_id":
                config.institution_id = value
            case "institution_name":
                config.institution_name = value
            case "class_id":
                config.class_id = value
            case "class_name":
                config.class_name = value

    return config
