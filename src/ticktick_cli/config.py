"""Configuration management for the TickTick CLI."""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

TT_HOME = Path(os.environ.get("TT_HOME", Path.home() / ".config" / "ticktick-cli"))
CONFIG_FILE = TT_HOME / "tt.conf"
TOKEN_FILE = TT_HOME / ".tokens.json"

DEFAULT_REDIRECT_URI = "http://localhost:8080/callback"
OUTPUT_FORMATS = ("human", "json")


@dataclass
class Config:
    """CLI configuration."""

    ticktick_client_id: str = ""
    ticktick_client_secret: str = ""
    redirect_uri: str = DEFAULT_REDIRECT_URI
    default_list: str = ""
    output: str = "human"


@dataclass
class Tokens:
    """OAuth tokens for TickTick."""

    access_token: str = ""
    refresh_token: str = ""
    expires_at: int = 0

    def save(self, path: Path | None = None) -> None:
        """Save tokens to file."""
        path = path or TOKEN_FILE
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(
                {
                    "access_token": self.access_token,
                    "refresh_token": self.refresh_token,
                    "expires_at": self.expires_at,
                }
            )
        )
        path.chmod(0o600)

    @classmethod
    def load(cls, path: Path | None = None) -> "Tokens":
        """Load tokens from file."""
        path = path or TOKEN_FILE
        if not path.exists():
            return cls()
        try:
            data = json.loads(path.read_text())
            return cls(
                access_token=data.get("access_token", ""),
                refresh_token=data.get("refresh_token", ""),
                expires_at=data.get("expires_at", 0),
            )
        except (json.JSONDecodeError, KeyError, AttributeError):
            logger.warning(f"Ignoring unreadable token file: {path}")
            return cls()

    @staticmethod
    def clear(path: Path | None = None) -> bool:
        """Delete stored tokens. Returns True if a file was removed."""
        path = path or TOKEN_FILE
        if not path.exists():
            return False
        path.unlink()
        return True


def _strip_value(value: str) -> str:
    """Handle quoted values with inline comments: "value" # comment"""
    if value.startswith('"') or value.startswith("'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        if end_quote != -1:
            return value[1:end_quote]
        return value[1:]
    # Unquoted: strip inline comments
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from tt.conf, then apply environment overrides."""
    config = Config()
    path = path or CONFIG_FILE

    if path.exists():
        for line in path.read_text().splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            if "=" not in line:
                continue

            key, _, value = line.partition("=")
            key = key.strip().lower()
            value = _strip_value(value.strip())

            match key:
                case "ticktick_client_id":
                    config.ticktick_client_id = value
                case "ticktick_client_secret":
                    config.ticktick_client_secret = value
                case "redirect_uri":
                    config.redirect_uri = value
                case "default_list":
                    config.default_list = value
                case "output":
                    if value.lower() in OUTPUT_FORMATS:
                        config.output = value.lower()
                    else:
                        logger.warning(f"Unknown OUTPUT '{value}', using '{config.output}'")
                case _:
                    logger.debug(f"Ignoring unknown config key: {key}")

    config.ticktick_client_id = os.environ.get("TICKTICK_CLIENT_ID", config.ticktick_client_id)
    config.ticktick_client_secret = os.environ.get(
        "TICKTICK_CLIENT_SECRET", config.ticktick_client_secret
    )
    return config
