#!/usr/bin/env python3
from dataclasses import dataclass, fields, replace
import os
from pathlib import Path
from typing import Any, Optional
from dotenv import load_dotenv

load_dotenv()

TRUE_VALUES = ("1", "true", "yes", "y", "on")
FALSE_VALUES = ("0", "false", "no", "n", "off")


def parse_bool(value: Any, fallback: Optional[bool] = None) -> Optional[bool]:
    """Interpret yes/no style values from the command line, env or YAML."""
    if value is None:
        return fallback
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in TRUE_VALUES:
            return True
        if normalized in FALSE_VALUES:
            return False
    return fallback


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass
class Config:
    """Capture configuration"""
    viewport_width: int = _env_int("LONGSHOT_WIDTH", 1600)
    viewport_height: int = _env_int("LONGSHOT_HEIGHT", 900)
    wait_ms: int = _env_int("LONGSHOT_WAIT_MS", 30000)
    scroll_wait_ms: int = _env_int("LONGSHOT_SCROLL_WAIT_MS", 250)
    timeout_ms: int = _env_int("LONGSHOT_TIMEOUT_MS", 120000)
    stitch: bool = parse_bool(os.getenv("LONGSHOT_STITCH"), True)
    headless: bool = parse_bool(os.getenv("LONGSHOT_HEADLESS"), True)
    device_scale_factor: float = float(os.getenv("LONGSHOT_DEVICE_SCALE_FACTOR", "2"))
    chrome_path: Optional[str] = os.getenv("LONGSHOT_CHROME_PATH") or None
    user_data_dir: Optional[str] = os.getenv("LONGSHOT_USER_DATA_DIR") or None
    profile_directory: Optional[str] = os.getenv("LONGSHOT_PROFILE_DIRECTORY") or None
    screenshot_dir: Path = Path(os.getenv("LONGSHOT_SCREENSHOT_DIR", "./screenshots"))
    # Pause before the single retry of a failed bounding-box lookup
    geometry_retry_delay_ms: int = _env_int("LONGSHOT_GEOMETRY_RETRY_MS", 500)

    def with_overrides(self, **values: Any) -> "Config":
        """Copy of this config; keys set to None keep their current value."""
        known = {f.name for f in fields(self)}
        unknown = set(values) - known
        if unknown:
            raise TypeError(f"Unknown config fields: {', '.join(sorted(unknown))}")
        changes = {k: v for k, v in values.items() if v is not None}
        return replace(self, **changes)


config = Config()
