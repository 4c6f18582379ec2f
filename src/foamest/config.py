from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Mapping, Optional

import yaml

from .models import OVERHEAD_CATEGORIES, BusinessSettings
from .numeric import to_flag, to_float

LOGGER = logging.getLogger(__name__)

ENV_PREFIX = "FOAMEST_"


@dataclass(frozen=True)
class Config:
    """Runtime configuration assembled from environment variables and CLI options."""

    base_dir: Path
    settings_path: Optional[Path]
    output_dir: Path
    business: BusinessSettings
    verbose: bool = False


def _to_path(value: object | None) -> Optional[Path]:
    if value is None:
        return None
    if isinstance(value, Path):
        return value.expanduser().resolve()
    text = str(value).strip()
    if not text:
        return None
    return Path(text).expanduser().resolve()


def _namespace(cli_args: object | None) -> SimpleNamespace:
    if cli_args is None:
        return SimpleNamespace()
    if isinstance(cli_args, SimpleNamespace):
        return cli_args
    if hasattr(cli_args, "__dict__"):
        return SimpleNamespace(**{k: v for k, v in vars(cli_args).items()})
    return SimpleNamespace()


def _read_settings_file(path: Path) -> Mapping[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        if path.suffix.lower() in {".yaml", ".yml"}:
            raw = yaml.safe_load(f)
        else:
            raw = json.load(f)
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise ValueError(f"Business settings in {path} must be a mapping")
    # Allow the settings to live under a top-level key next to other sections.
    nested = raw.get("business_settings") or raw.get("businessSettings")
    return nested if isinstance(nested, Mapping) else raw


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def load_business_settings(path: Optional[Path], env: Mapping[str, str] | None = None) -> BusinessSettings:
    """
    Build :class:`BusinessSettings` from a YAML/JSON file plus environment overrides.

    Keys may be snake_case or camelCase. ``FOAMEST_OVERHEAD_<CATEGORY>``,
    ``FOAMEST_EXPECTED_MONTHLY_HOURS`` and ``FOAMEST_TARGET_NET_MARGIN`` win over
    the file. Unparseable or negative values are ignored with a warning.
    """

    env = env or {}
    values: dict[str, float] = {}
    if path is not None:
        if path.exists():
            raw = _read_settings_file(path)
            for f in fields(BusinessSettings):
                for key in (f.name, _camel(f.name)):
                    if key in raw:
                        number = to_float(raw[key])
                        if number is None or number < 0:
                            LOGGER.warning("Ignoring invalid %s=%r in %s", f.name, raw[key], path)
                        else:
                            values[f.name] = number
                        break
        else:
            LOGGER.warning("Business settings file %s not found; using defaults", path)

    env_keys = {name: f"{ENV_PREFIX}OVERHEAD_{name.upper()}" for name in OVERHEAD_CATEGORIES}
    env_keys["expected_monthly_hours"] = f"{ENV_PREFIX}EXPECTED_MONTHLY_HOURS"
    env_keys["target_net_margin"] = f"{ENV_PREFIX}TARGET_NET_MARGIN"
    for name, key in env_keys.items():
        if key not in env:
            continue
        number = to_float(env.get(key))
        if number is None or number < 0:
            LOGGER.warning("Ignoring invalid %s=%r", key, env.get(key))
            continue
        values[name] = number

    settings = BusinessSettings(**values)
    if settings.expected_monthly_hours <= 0:
        LOGGER.warning("expected_monthly_hours is 0; overhead will not be allocated to jobs")
    if settings.target_net_margin >= 100:
        LOGGER.warning("target_net_margin must be below 100; break-even revenue will read 0")
    return settings


def load_config(env: Mapping[str, str], cli_args: object | None = None) -> Config:
    """Build a runtime :class:`Config` from environment variables and CLI options."""

    base_dir = Path(__file__).resolve().parents[2]
    default_output_dir = (base_dir / "outputs").resolve()

    settings_path = _to_path(env.get(f"{ENV_PREFIX}SETTINGS"))
    output_dir = _to_path(env.get(f"{ENV_PREFIX}OUTPUT_DIR")) or default_output_dir
    verbose = to_flag(env.get(f"{ENV_PREFIX}VERBOSE"))

    cli_ns = _namespace(cli_args)
    if getattr(cli_ns, "settings", None):
        settings_path = _to_path(cli_ns.settings) or settings_path
    if getattr(cli_ns, "output_dir", None):
        output_dir = _to_path(cli_ns.output_dir) or output_dir
    if getattr(cli_ns, "verbose", False):
        verbose = bool(cli_ns.verbose)

    return Config(
        base_dir=base_dir,
        settings_path=settings_path,
        output_dir=output_dir,
        business=load_business_settings(settings_path, env),
        verbose=verbose,
    )


__all__ = ["Config", "load_config", "load_business_settings"]
