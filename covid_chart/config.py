from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from loguru import logger

DATA_URL = "https://api.covidtracking.com/v1/us/daily.json"
DAY_OPTIONS = (30, 60, 90)
LAYOUT_MODES = ("fixed", "responsive")


@dataclass(frozen=True)
class ChartConfig:
    data_url: str = DATA_URL
    timeout_s: float | None = None
    default_days: int = 30
    layout: str = "fixed"
    canvas_width: int = 1200
    canvas_height: int = 600
    container_width: int = 1000
    log_level: str = "INFO"
    file_log_level: str = "DEBUG"
    log_dir: str = "log"


def _positive_number(env: Mapping[str, str], name: str, default, cast):
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = cast(raw.strip())
    except ValueError:
        logger.warning("[load_config] - invalid_value - {}={!r} using default {}", name, raw, default)
        return default
    if value <= 0:
        logger.warning("[load_config] - non_positive_value - {}={!r} using default {}", name, raw, default)
        return default
    return value


def load_config(env: Mapping[str, str] | None = None) -> ChartConfig:
    """Builds the chart configuration from environment variables.

    Unknown or malformed values fall back to the defaults of ``ChartConfig``.
    """
    env = os.environ if env is None else env
    defaults = ChartConfig()

    default_days = _positive_number(env, "COVID_CHART_DEFAULT_DAYS", defaults.default_days, int)
    if default_days not in DAY_OPTIONS:
        logger.warning(
            "[load_config] - unsupported_days - COVID_CHART_DEFAULT_DAYS={} allowed={}",
            default_days,
            DAY_OPTIONS,
        )
        default_days = defaults.default_days

    layout = (env.get("COVID_CHART_LAYOUT") or defaults.layout).strip().lower()
    if layout not in LAYOUT_MODES:
        logger.warning("[load_config] - unknown_layout - COVID_CHART_LAYOUT={!r}", layout)
        layout = defaults.layout

    return ChartConfig(
        data_url=(env.get("COVID_CHART_DATA_URL") or defaults.data_url).strip(),
        timeout_s=_positive_number(env, "COVID_CHART_TIMEOUT_S", None, float),
        default_days=default_days,
        layout=layout,
        canvas_width=_positive_number(env, "COVID_CHART_WIDTH", defaults.canvas_width, int),
        canvas_height=_positive_number(env, "COVID_CHART_HEIGHT", defaults.canvas_height, int),
        container_width=_positive_number(env, "COVID_CHART_CONTAINER_WIDTH", defaults.container_width, int),
        log_level=env.get("LOG_LEVEL", defaults.log_level),
        file_log_level=env.get("LOG_FILE_LEVEL", defaults.file_log_level),
        log_dir=env.get("COVID_CHART_LOG_DIR", defaults.log_dir),
    )
