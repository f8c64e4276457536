"""Centralised settings for Nexia.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

NOTEBOOK_SUFFIX = ".nexia.json"


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Workspace / storage
    # ------------------------------------------------------------------
    workspace_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("NEXIA_WORKSPACE", Path.home() / ".nexia")
        )
    )

    @property
    def default_notebook_path(self) -> Path:
        """Notebook file used when the CLI has no active notebook."""
        return self.workspace_dir / f"notebook{NOTEBOOK_SUFFIX}"

    @property
    def cli_config_dir(self) -> Path:
        """Directory holding the CLI context file."""
        return self.workspace_dir / "cli"

    @property
    def log_dir(self) -> Path:
        return self.workspace_dir / "logs"

    # ------------------------------------------------------------------
    # Notebook defaults
    # ------------------------------------------------------------------
    default_notebook_name: str = field(
        default_factory=lambda: os.environ.get(
            "NEXIA_DEFAULT_NOTEBOOK_NAME", "Untitled Notebook"
        )
    )
    json_indent: int = field(
        default_factory=lambda: int(os.environ.get("NEXIA_JSON_INDENT", "2"))
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("NEXIA_LOG_LEVEL", "INFO").upper()
    )


# Module-level singleton — import this everywhere:
#   from nexia.config import settings
settings = Settings()
