"""
Helpers for loading pixforge environment configuration.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pixforge.io.settings import GeneratorSettings

PIXFORGE_ENV_FILENAME = "pixforge.env"


def default_env_path() -> Path:
    return Path.home() / PIXFORGE_ENV_FILENAME


def load_settings(path: Optional[Path] = None) -> GeneratorSettings:
    """
    Load settings from ``path`` or the default env file in the home directory.

    Environment variables always win over values from the file; a missing file
    is not an error.
    """
    env_file = Path(path) if path is not None else default_env_path()
    return GeneratorSettings(_env_file=env_file if env_file.exists() else None)
