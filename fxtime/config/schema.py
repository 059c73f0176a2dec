"""
Configuration schema and loader.

This module defines dataclasses that mirror the expected structure of
the YAML configuration file (`config.yaml`).  A helper function
`load_config()` reads a YAML file from disk and returns an instance
of `Config` populated with reasonable defaults for any missing
fields.

Relative paths in the configuration are resolved against the
directory containing the YAML file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional, Dict, Any
import yaml

from ..data.models import TickLayout
from ..errors import InvalidArgumentError


@dataclass
class ClockConfig:
    """Timezone defaults.

    Attributes
    ----------
    default_zone : str
        Zone assumed for timestamps given without one: ``GMT``,
        ``UTC``, ``FXT`` or an IANA zone name.
    """

    default_zone: str = "GMT"


@dataclass
class DataConfig:
    """Data source configuration.

    Attributes
    ----------
    bar_dir : str
        Directory holding one sub-directory of MyFX history files per
        symbol.
    tick_layout : str
        Binary layout of tick files: ``myfx`` (12 bytes) or
        ``dukascopy`` (20 bytes).
    instruments_file : str, optional
        YAML instrument table replacing the built-in one.
    """

    bar_dir: str = "data"
    tick_layout: str = "myfx"
    instruments_file: Optional[str] = None


@dataclass
class ReportConfig:
    """Report output configuration."""

    out_dir: str = "results"


@dataclass
class LoggingConfig:
    """Logging configuration.  `level` is a standard logging level name."""

    level: str = "INFO"


@dataclass
class Config:
    """Root configuration.

    Attributes
    ----------
    clock : ClockConfig
        Timezone defaults.
    data : DataConfig
        Data source configuration.
    report : ReportConfig
        Report output configuration.
    logging : LoggingConfig
        Logging configuration.
    root : str
        Directory relative paths are resolved against.
    """

    clock: ClockConfig = field(default_factory=ClockConfig)
    data: DataConfig = field(default_factory=DataConfig)
    report: ReportConfig = field(default_factory=ReportConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    root: str = "."

    @property
    def tick_layout(self) -> TickLayout:
        return TickLayout.from_name(self.data.tick_layout)

    def resolve_path(self, path: str) -> str:
        """Return `path` made absolute against the configuration root."""
        path = os.path.expanduser(path)
        if os.path.isabs(path):
            return path
        return os.path.abspath(os.path.join(self.root, path))


def _merge_dict(defaults: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge two dictionaries.

    The values in `override` take precedence over those in `defaults`.
    This helper is used when loading YAML into nested dataclasses.
    """
    result: Dict[str, Any] = defaults.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _merge_dict(result[key], value)
        else:
            result[key] = value
    return result


def load_config(path: str) -> Config:
    """Load a configuration file from the given YAML path.

    Parameters
    ----------
    path : str
        Path to the YAML file.

    Returns
    -------
    Config
        A populated configuration object.  Missing fields are filled with
        sensible defaults defined in the dataclasses.

    Raises
    ------
    InvalidArgumentError
        If a section or a key is unknown, or a value is out of range.
    """
    with open(path, "r", encoding="utf-8") as fh:
        raw: Dict[str, Any] = yaml.safe_load(fh) or {}

    # Build nested dictionaries representing the default dataclasses
    defaults: Dict[str, Any] = {
        'clock': {
            'default_zone': "GMT",
        },
        'data': {
            'bar_dir': "data",
            'tick_layout': "myfx",
            'instruments_file': None,
        },
        'report': {
            'out_dir': "results",
        },
        'logging': {
            'level': "INFO",
        },
    }

    unknown = set(raw) - set(defaults)
    if unknown:
        raise InvalidArgumentError(f"Invalid configuration in {path}: unknown sections {sorted(unknown)}")

    merged = _merge_dict(defaults, raw)

    # Construct dataclasses from the merged dictionary
    try:
        clock_cfg = ClockConfig(**merged['clock'])
        data_cfg = DataConfig(**merged['data'])
        report_cfg = ReportConfig(**merged['report'])
        logging_cfg = LoggingConfig(**merged['logging'])
    except TypeError as exc:
        raise InvalidArgumentError(f"Invalid configuration in {path}: {exc}") from exc

    cfg = Config(
        clock=clock_cfg,
        data=data_cfg,
        report=report_cfg,
        logging=logging_cfg,
        root=os.path.dirname(os.path.abspath(path)),
    )
    # Validate enum-like values early
    TickLayout.from_name(cfg.data.tick_layout)
    cfg.logging.level = str(cfg.logging.level).upper()
    return cfg
