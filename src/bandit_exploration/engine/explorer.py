"""Generator-then-enforcer composition over caller-owned PDF buffers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

from .contract import (
    SUM_TOLERANCE,
    TOUCHED_MASS_THRESHOLD,
    UNIFORM_EXPLORATION_THRESHOLD,
    ExplorationStatus,
    PdfBuffer,
    ScoreBuffer,
    VoteBuffer,
    _validate_positive,
    is_valid_pdf,
    pdf_total,
)
from .enforcer import enforce_minimum_probability
from .generators import generate_bag, generate_epsilon_greedy, generate_softmax

LOGGER = logging.getLogger("bandit_exploration.engine.explorer")

Stage = Literal["generate", "enforce"]


@dataclass(frozen=True)
class ExplorationConfig:
    min_prob: float = 0.0
    update_zero_elements: bool = True
    uniform_threshold: float = UNIFORM_EXPLORATION_THRESHOLD
    touched_mass_threshold: float = TOUCHED_MASS_THRESHOLD
    sum_tolerance: float = SUM_TOLERANCE


@dataclass(frozen=True)
class ExplorationOutcome:
    status: ExplorationStatus
    stage: Stage
    enforced: bool
    total_mass: float
    is_valid: bool

    @property
    def ok(self) -> bool:
        return self.status == ExplorationStatus.OK


class ExplorationEngine:
    """Stateless pipeline: build a PDF with one generator, then floor it."""

    def __init__(self, config: ExplorationConfig | None = None) -> None:
        self.config = config or ExplorationConfig()
        _validate_positive("sum_tolerance", self.config.sum_tolerance)

    def epsilon_greedy(self, pdf: PdfBuffer, *, epsilon: float, top_action: int) -> ExplorationOutcome:
        status = generate_epsilon_greedy(epsilon, top_action, pdf)
        return self._finish("epsilon_greedy", status, pdf)

    def softmax(self, pdf: PdfBuffer, *, scores: ScoreBuffer, lambda_: float) -> ExplorationOutcome:
        status = generate_softmax(lambda_, scores, pdf)
        return self._finish("softmax", status, pdf)

    def bag(self, pdf: PdfBuffer, *, vote_counts: VoteBuffer) -> ExplorationOutcome:
        status = generate_bag(vote_counts, pdf)
        return self._finish("bag", status, pdf)

    def enforce(self, pdf: PdfBuffer) -> ExplorationOutcome:
        status = self._enforce(pdf)
        return self._outcome(status, "enforce", enforced=status == ExplorationStatus.OK, pdf=pdf)

    def _finish(self, generator: str, status: ExplorationStatus, pdf: PdfBuffer) -> ExplorationOutcome:
        if status != ExplorationStatus.OK:
            return self._outcome(status, "generate", enforced=False, pdf=pdf)
        if self.config.min_prob <= 0.0:
            return self._outcome(status, "generate", enforced=False, pdf=pdf)

        enforce_status = self._enforce(pdf)
        outcome = self._outcome(
            enforce_status,
            "enforce",
            enforced=enforce_status == ExplorationStatus.OK,
            pdf=pdf,
        )
        LOGGER.debug(
            "exploration_pdf generator=%s min_prob=%s total_mass=%s",
            generator,
            self.config.min_prob,
            outcome.total_mass,
        )
        return outcome

    def _enforce(self, pdf: PdfBuffer) -> ExplorationStatus:
        return enforce_minimum_probability(
            self.config.min_prob,
            self.config.update_zero_elements,
            pdf,
            uniform_threshold=self.config.uniform_threshold,
            touched_mass_threshold=self.config.touched_mass_threshold,
        )

    def _outcome(
        self,
        status: ExplorationStatus,
        stage: Stage,
        *,
        enforced: bool,
        pdf: PdfBuffer,
    ) -> ExplorationOutcome:
        if status != ExplorationStatus.OK:
            return ExplorationOutcome(status=status, stage=stage, enforced=False, total_mass=0.0, is_valid=False)
        return ExplorationOutcome(
            status=status,
            stage=stage,
            enforced=enforced,
            total_mass=pdf_total(pdf),
            is_valid=is_valid_pdf(pdf, tolerance=self.config.sum_tolerance),
        )
