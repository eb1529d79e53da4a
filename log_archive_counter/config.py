"""
Configuration

Every setting comes from an environment variable with a default.
"""
import os
import tempfile
from pathlib import Path

DEFAULT_PORT = 8080
DEFAULT_HOST = "127.0.0.1"
DEFAULT_TEMP_DIR = Path(tempfile.gettempdir()) / "log-archive-counter"
DEFAULT_MIN_FILES_FOR_PARALLEL = 5
DEFAULT_COUNT_GRACE_SECONDS = 3.0


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name, str(default))
    try:
        return int(raw)
    except ValueError:
        msg = f"Invalid {name} value: {raw}"
        raise ValueError(msg) from None


def get_port() -> int:
    """Get server port from environment or use default"""
    return _int_env("PORT", DEFAULT_PORT)


def get_host() -> str:
    """Get bind host from environment or use default"""
    return os.environ.get("HOST", DEFAULT_HOST)


def get_temp_dir() -> Path:
    """Get base directory for per-request temp directories"""
    return Path(os.environ.get("TEMP_DIR", str(DEFAULT_TEMP_DIR)))


def get_min_files_for_parallel() -> int:
    """Get minimum number of log files worth counting in parallel"""
    return _int_env("MIN_FILES_FOR_PARALLEL", DEFAULT_MIN_FILES_FOR_PARALLEL)


def get_count_grace_seconds() -> float:
    """Get how long to wait for counting workers before cancelling them"""
    raw = os.environ.get("COUNT_GRACE_SECONDS", str(DEFAULT_COUNT_GRACE_SECONDS))
    try:
        value = float(raw)
    except ValueError:
        value = -1.0
    if value <= 0:
        raise ValueError(f"Invalid COUNT_GRACE_SECONDS value: {raw}")
    return value
