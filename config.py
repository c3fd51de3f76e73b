"""
Centralized configuration for mch-summary.

Loads environment variables from .env and provides resolved paths and settings.
Values are read when the functions are called so a CI step can export them
right before invoking the tool.
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from utils.exceptions import ConfigError

# Load environment variables
load_dotenv()

DEFAULT_RESULTS_PATH = "../mch-results.json"
DEFAULT_REPOSITORY_URL = "https://github.com/MCJE-Tech-Shares/Benchmarks"


def get_path_var(var_name: str, default: Optional[str] = None, required: bool = True) -> Optional[Path]:
    """Retrieve a path from environment variables, resolving to absolute."""
    value = os.getenv(var_name, default)
    if not value:
        if required:
            raise ConfigError(f"Missing required environment variable '{var_name}'")
        return None
    return Path(value).expanduser().resolve()


def get_str_var(var_name: str, default: Optional[str] = None, required: bool = True) -> Optional[str]:
    """Retrieve a plain string from environment variables."""
    value = os.getenv(var_name, default)
    if not value:
        if required:
            raise ConfigError(f"Missing required environment variable '{var_name}'")
        return None
    return value


# -- Paths -------------------------------------------------------------------


def state_dir() -> Path:
    return Path(os.getenv("MCH_SUMMARY_STATE_DIR", str(Path.home() / ".mch_summary")))


def summary_path() -> Path:
    """Step summary file the report is appended to."""
    return get_path_var("GITHUB_STEP_SUMMARY")


def results_path() -> Path:
    return get_path_var("MCH_RESULTS_PATH", DEFAULT_RESULTS_PATH)


def source_root() -> Path:
    return get_path_var("MCH_SOURCE_ROOT", ".")


# -- Settings -----------------------------------------------------------------


def run_id() -> str:
    """Commit SHA used for source links."""
    return get_str_var("GITHUB_SHA")


def repository_url() -> str:
    return get_str_var("MCH_REPOSITORY_URL", DEFAULT_REPOSITORY_URL)


def log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO")


def debug_enabled() -> bool:
    return os.getenv("DEBUG", "false").lower() in ("true", "1", "yes")
