"""Configuration management for libraryloans.

Loads configuration from environment variables and provides defaults.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()


@dataclass
class Config:
    """Application configuration."""

    # Database
    db_path: Path

    # Lending policy
    renewal_days: int
    page_size: int

    # Notices and reports
    institution_name: str

    # Logging
    log_level: str

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        db_path_str = os.environ.get(
            "LIBRARYLOANS_DB_PATH",
            str(Path.home() / ".libraryloans" / "library.db"),
        )
        db_path = Path(db_path_str).expanduser()

        return cls(
            db_path=db_path,
            renewal_days=int(os.environ.get("LIBRARYLOANS_RENEWAL_DAYS", "7")),
            page_size=int(os.environ.get("LIBRARYLOANS_PAGE_SIZE", "10")),
            institution_name=os.environ.get(
                "LIBRARYLOANS_INSTITUTION", "School Library"
            ),
            log_level=os.environ.get("LIBRARYLOANS_LOG_LEVEL", "WARNING").upper(),
        )

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []

        if self.renewal_days < 1:
            errors.append(f"Renewal period must be at least one day: {self.renewal_days}")
        if self.page_size < 1:
            errors.append(f"Page size must be at least 1: {self.page_size}")

        # Check database directory is writable
        if str(self.db_path) != ":memory:" and not self.db_path.parent.exists():
            try:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
            except PermissionError:
                errors.append(f"Cannot create database directory: {self.db_path.parent}")

        return errors


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the global config instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Reset the global config instance. Used for testing."""
    global _config
    _config = None
