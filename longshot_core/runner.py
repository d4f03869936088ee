"""
Batch runner - long screenshots for every target in a YAML file

Example file:

    defaults:
      waitSeconds: 30
      outDir: ./screenshots/${date}
    targets:
      - name: overview
        url: https://grafana.example.com/d/abc
      - name: disabled-board
        url: https://grafana.example.com/d/def
        enabled: false

Precedence for every setting: command-line override, then the target, then
``defaults``, then the built-in default. ``targets`` may also be spelled
``dashboards`` or ``jobs``.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Union

import yaml

from .config import Config, config as default_config, parse_bool
from .diagnostics import get_logger
from .exceptions import ConfigError
from .models import CaptureResult

logger = get_logger(__name__)

TARGET_LIST_KEYS = ("targets", "dashboards", "jobs")
DEFAULT_FILENAME = "${name}_${timestamp}.png"
DEFAULT_NAME = "capture"
PROFILE_DIR_NAME = ".longshot_profile"

_TEMPLATE_RE = re.compile(r"\$\{(\w+)\}")

CaptureFn = Callable[[str, Path, Config], Awaitable[CaptureResult]]


@dataclass
class CaptureJob:
    name: str
    url: str
    output_path: Path
    settings: Config = field(repr=False)
    enabled: bool = True


def load_targets_config(path: Union[str, Path]) -> Dict[str, Any]:
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config root must be a mapping: {path}")
    return data


def normalize_targets(config: Mapping[str, Any]) -> List[Any]:
    if not isinstance(config, Mapping):
        return []
    for key in TARGET_LIST_KEYS:
        if isinstance(config.get(key), list):
            return config[key]
    return []


def render_template(text: Optional[str], variables: Mapping[str, Any]) -> Optional[str]:
    """Replace ${key} placeholders; unknown keys render as empty strings."""
    if not text:
        return text
    return _TEMPLATE_RE.sub(lambda m: str(variables.get(m.group(1), "")), str(text))


def pick(value: Any, fallback: Any) -> Any:
    return fallback if value is None or value == "" else value


def format_date(now: datetime) -> str:
    return now.strftime("%Y%m%d")


def format_timestamp(now: datetime) -> str:
    return now.strftime("%Y%m%d_%H%M%S")


def _layered(key: str, target: Mapping, defaults: Mapping, overrides: Mapping, fallback: Any = None,
             override_key: Optional[str] = None) -> Any:
    value = pick(target.get(key), pick(defaults.get(key), fallback))
    return pick(overrides.get(override_key or key), value)


def build_jobs(
    config: Mapping[str, Any],
    base_dir: Union[str, Path],
    overrides: Optional[Mapping[str, Any]] = None,
    target_name: Optional[str] = None,
    now: Optional[datetime] = None,
    base_settings: Optional[Config] = None,
) -> List[CaptureJob]:
    """
    Resolve every selected target into a CaptureJob.

    Args:
        config: Parsed YAML
        base_dir: Directory that relative defaults (screenshots, profile) hang off
        overrides: Command-line values keyed by out_dir, profile_dir,
            profile_name, width, height, wait (seconds), scroll_wait_ms,
            stitch, headless; None means "not given"
        target_name: Only the target whose name or id matches
        now: Clock used for ${date} and ${timestamp}

    Raises:
        ConfigError: no targets, unknown target_name, or an enabled target
            without a url
    """
    overrides = dict(overrides or {})
    base_settings = base_settings or default_config
    base_dir = Path(base_dir)
    now = now or datetime.now()

    defaults = config.get("defaults") if isinstance(config.get("defaults"), Mapping) else {}
    targets = normalize_targets(config)
    if not targets:
        raise ConfigError("No targets (or dashboards/jobs) list found in config")

    if target_name:
        selected = [
            t for t in targets
            if isinstance(t, Mapping) and target_name in (t.get("name"), t.get("id"))
        ]
        if not selected:
            raise ConfigError(f"Target not found: {target_name}")
    else:
        selected = [t for t in targets if isinstance(t, Mapping)]

    base_vars = {"date": format_date(now), "timestamp": format_timestamp(now)}
    jobs: List[CaptureJob] = []
    for target in selected:
        name = str(pick(target.get("name"), pick(target.get("id"), DEFAULT_NAME)))
        variables = {**base_vars, "name": name}

        enabled = parse_bool(pick(target.get("enabled"), defaults.get("enabled")), True)
        url = pick(target.get("url"), defaults.get("url"))
        if enabled and not url:
            raise ConfigError(f"Target has no url: {name}")

        wait_seconds = _layered("waitSeconds", target, defaults, overrides, 30, override_key="wait")
        stitch = parse_bool(
            _layered("stitch", target, defaults, overrides, True), base_settings.stitch
        )
        out_dir = render_template(
            str(_layered("outDir", target, defaults, overrides, base_dir / "screenshots", override_key="out_dir")),
            variables,
        )
        filename = render_template(
            pick(target.get("filename"), pick(defaults.get("filename"), DEFAULT_FILENAME)),
            variables,
        )

        settings = base_settings.with_overrides(
            viewport_width=int(_layered("width", target, defaults, overrides, base_settings.viewport_width)),
            viewport_height=int(_layered("height", target, defaults, overrides, base_settings.viewport_height)),
            wait_ms=int(float(wait_seconds) * 1000),
            scroll_wait_ms=int(_layered(
                "scrollWaitMs", target, defaults, overrides, base_settings.scroll_wait_ms,
                override_key="scroll_wait_ms",
            )),
            stitch=stitch,
            headless=parse_bool(overrides.get("headless"), base_settings.headless),
            user_data_dir=str(_layered(
                "profileDir", target, defaults, overrides, base_dir / PROFILE_DIR_NAME,
                override_key="profile_dir",
            )),
            profile_directory=_layered(
                "profileName", target, defaults, overrides, override_key="profile_name"
            ),
        )

        jobs.append(CaptureJob(
            name=name,
            url=str(url or ""),
            output_path=(Path(out_dir) / filename).resolve(),
            settings=settings,
            enabled=bool(enabled),
        ))
    return jobs


async def run_jobs(jobs: List[CaptureJob], capture: Optional[CaptureFn] = None) -> List[CaptureResult]:
    """
    Capture jobs one after another.

    A persistent profile can only be opened by one browser at a time, so jobs
    never run in parallel. The first failure propagates and stops the batch.
    """
    if capture is None:
        from .browser_setup import capture_url
        capture = capture_url

    results: List[CaptureResult] = []
    for job in jobs:
        if not job.enabled:
            logger.info(f"Skipped (enabled=false): {job.name}")
            continue
        logger.info(f"Capturing long screenshot: {job.name}")
        result = await capture(job.url, job.output_path, job.settings)
        logger.info(f"Done: {result.path}")
        results.append(result)
    return results
