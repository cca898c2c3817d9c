"""Runtime settings read from the environment.

A ``.env`` file in the working directory is loaded first; variables
already set in the environment win over it.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from kitstock.domain.exceptions import ConfigurationError
from kitstock.domain.model.value_objects import DEFAULT_CURRENCY
from kitstock.domain.service.cascade import CascadePolicy

# When installed in editable mode the project root is the repo root.
DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    data_dir: Path = DEFAULT_DATA_DIR
    cascade_policy: CascadePolicy = CascadePolicy.BEST_EFFORT
    log_level: str = "WARNING"
    currency: str = DEFAULT_CURRENCY

    @property
    def log_level_number(self) -> int:
        return getattr(logging, self.log_level)


def load_settings(env_file: Path | None = None) -> Settings:
    load_dotenv(env_file or find_dotenv(usecwd=True))

    data_dir = os.getenv("KITSTOCK_DATA_DIR")
    policy = os.getenv("KITSTOCK_CASCADE_POLICY", CascadePolicy.BEST_EFFORT.value).strip().lower()
    log_level = os.getenv("KITSTOCK_LOG_LEVEL", "WARNING").strip().upper()
    currency = os.getenv("KITSTOCK_CURRENCY", DEFAULT_CURRENCY).strip().upper()

    try:
        cascade_policy = CascadePolicy(policy)
    except ValueError:
        choices = ", ".join(p.value for p in CascadePolicy)
        raise ConfigurationError(
            f"KITSTOCK_CASCADE_POLICY must be one of {choices}, got '{policy}'"
        ) from None
    if log_level not in _LOG_LEVELS:
        raise ConfigurationError(
            f"KITSTOCK_LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}, got '{log_level}'"
        )
    if len(currency) != 3 or not currency.isalpha():
        raise ConfigurationError(f"KITSTOCK_CURRENCY must be a 3-letter code, got '{currency}'")

    return Settings(
        data_dir=Path(data_dir).expanduser() if data_dir else DEFAULT_DATA_DIR,
        cascade_policy=cascade_policy,
        log_level=log_level,
        currency=currency,
    )
