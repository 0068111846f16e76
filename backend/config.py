from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

from scraper.config import (
    ScraperSettings,
    bool_from_env,
    float_from_env,
    int_from_env,
    load_from_environment as load_scraper_settings,
)

from .services.analysis import AnalysisConfig

MAX_ALTERNATIVES_LIMIT = 4


@dataclass(frozen=True)
class FlaskSettings:
    secret_key: str = "lottoanalysis-dev-secret"
    debug: bool = False


@dataclass(frozen=True)
class ServerSettings:
    host: str = "0.0.0.0"
    port: int = 8080


@dataclass(frozen=True)
class AppSettings:
    flask: FlaskSettings
    server: ServerSettings
    scraper: ScraperSettings
    analysis: AnalysisConfig


def _load_analysis_config() -> AnalysisConfig:
    defaults = AnalysisConfig()
    config = AnalysisConfig(
        recency_window=int_from_env(os.getenv("ANALYSIS__RECENCY_WINDOW"), defaults.recency_window),
        trend_window=int_from_env(os.getenv("ANALYSIS__TREND_WINDOW"), defaults.trend_window),
        frequency_weight=float_from_env(os.getenv("ANALYSIS__FREQUENCY_WEIGHT"), defaults.frequency_weight),
        recency_weight=float_from_env(os.getenv("ANALYSIS__RECENCY_WEIGHT"), defaults.recency_weight),
        max_alternatives=int_from_env(os.getenv("ANALYSIS__MAX_ALTERNATIVES"), defaults.max_alternatives),
    )
    if config.recency_window < 1 or config.trend_window < 1:
        raise RuntimeError("ANALYSIS__RECENCY_WINDOW and ANALYSIS__TREND_WINDOW must be positive.")
    if not config.min_alternatives <= config.max_alternatives <= MAX_ALTERNATIVES_LIMIT:
        raise RuntimeError(
            f"ANALYSIS__MAX_ALTERNATIVES must be between {config.min_alternatives} "
            f"and {MAX_ALTERNATIVES_LIMIT}."
        )
    if config.frequency_weight < 0 or config.recency_weight < 0:
        raise RuntimeError("ANALYSIS__FREQUENCY_WEIGHT and ANALYSIS__RECENCY_WEIGHT must not be negative.")
    if config.frequency_weight + config.recency_weight <= 0:
        raise RuntimeError("ANALYSIS__FREQUENCY_WEIGHT and ANALYSIS__RECENCY_WEIGHT cannot both be zero.")
    return config


@lru_cache(maxsize=1)
def load_settings(dotenv_path: Optional[str] = None) -> AppSettings:
    if dotenv_path:
        load_dotenv(dotenv_path)
    else:
        load_dotenv()

    flask_settings = FlaskSettings(
        secret_key=os.getenv("FLASK_SECRET_KEY", "lottoanalysis-dev-secret"),
        debug=bool_from_env(os.getenv("FLASK_DEBUG"), False),
    )
    server_settings = ServerSettings(
        host=os.getenv("HOST", "0.0.0.0"),
        port=int_from_env(os.getenv("PORT"), 8080),
    )

    return AppSettings(
        flask=flask_settings,
        server=server_settings,
        scraper=load_scraper_settings(),
        analysis=_load_analysis_config(),
    )
