"""Typed runtime configuration for the bandit exploration toolkit."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Mapping

from .engine import (
    SUM_TOLERANCE,
    TOUCHED_MASS_THRESHOLD,
    UNIFORM_EXPLORATION_THRESHOLD,
    ExplorationConfig,
)

ENV_PREFIX = "BANDIT_EXPLORATION_"


class GeneratorKind(StrEnum):
    """PDF generator selected on the command line."""

    EPSILON_GREEDY = "epsilon-greedy"
    SOFTMAX = "softmax"
    BAG = "bag"


@dataclass(slots=True, frozen=True)
class ThresholdConfig:
    uniform_threshold: float = UNIFORM_EXPLORATION_THRESHOLD
    touched_mass_threshold: float = TOUCHED_MASS_THRESHOLD
    sum_tolerance: float = SUM_TOLERANCE


@dataclass(slots=True, frozen=True)
class EnforcementConfig:
    min_prob: float = 0.0
    update_zero_elements: bool = True

    @property
    def enabled(self) -> bool:
        return self.min_prob > 0.0


@dataclass(slots=True, frozen=True)
class LoggingConfig:
    level: str = "WARNING"
    log_file: Path | None = None


@dataclass(slots=True, frozen=True)
class AppConfig:
    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)
    enforcement: EnforcementConfig = field(default_factory=EnforcementConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def exploration_config(self) -> ExplorationConfig:
        return ExplorationConfig(
            min_prob=self.enforcement.min_prob,
            update_zero_elements=self.enforcement.update_zero_elements,
            uniform_threshold=self.thresholds.uniform_threshold,
            touched_mass_threshold=self.thresholds.touched_mass_threshold,
            sum_tolerance=self.thresholds.sum_tolerance,
        )


def build_config(
    *,
    min_prob: float,
    update_zero_elements: bool,
    log_level: str = "WARNING",
    log_file: Path | None = None,
    thresholds: ThresholdConfig | None = None,
) -> AppConfig:
    """Constructs an app config from CLI inputs."""
    return AppConfig(
        thresholds=thresholds or ThresholdConfig(),
        enforcement=EnforcementConfig(
            min_prob=min_prob,
            update_zero_elements=update_zero_elements,
        ),
        logging=LoggingConfig(level=log_level.strip().upper(), log_file=log_file),
    )


def load_thresholds_from_env(env: Mapping[str, str] | None = None) -> ThresholdConfig:
    source = env if env is not None else os.environ
    thresholds = ThresholdConfig(
        uniform_threshold=_parse_env_float(
            source,
            f"{ENV_PREFIX}UNIFORM_THRESHOLD",
            default=UNIFORM_EXPLORATION_THRESHOLD,
        ),
        touched_mass_threshold=_parse_env_float(
            source,
            f"{ENV_PREFIX}TOUCHED_MASS_THRESHOLD",
            default=TOUCHED_MASS_THRESHOLD,
        ),
        sum_tolerance=_parse_env_float(
            source,
            f"{ENV_PREFIX}SUM_TOLERANCE",
            default=SUM_TOLERANCE,
        ),
    )
    validate_thresholds(thresholds)
    return thresholds


def validate_thresholds(thresholds: ThresholdConfig) -> None:
    if thresholds.sum_tolerance <= 0.0:
        raise RuntimeError(f"{ENV_PREFIX}SUM_TOLERANCE must be positive.")
    for key, value in (
        ("UNIFORM_THRESHOLD", thresholds.uniform_threshold),
        ("TOUCHED_MASS_THRESHOLD", thresholds.touched_mass_threshold),
    ):
        if value <= 0.0 or value > 1.0:
            raise RuntimeError(f"{ENV_PREFIX}{key} must be in (0, 1].")


def _parse_env_float(source: Mapping[str, str], key: str, *, default: float) -> float:
    raw = source.get(key)
    if raw is None:
        return default
    normalized = raw.strip()
    if not normalized:
        return default
    try:
        return float(normalized)
    except ValueError as exc:
        raise RuntimeError(f"{key} must be a number.") from exc
