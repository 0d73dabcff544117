"""Engine exports for exploration PDF generation and floor enforcement."""

from .contract import (
    SUM_TOLERANCE,
    TOUCHED_MASS_THRESHOLD,
    UNIFORM_EXPLORATION_THRESHOLD,
    BufferSpan,
    ExplorationError,
    ExplorationStatus,
    as_span,
    check_status,
    clamp_action,
    is_valid_pdf,
    pdf_total,
)
from .enforcer import enforce_minimum_probability
from .explorer import ExplorationConfig, ExplorationEngine, ExplorationOutcome
from .generators import generate_bag, generate_epsilon_greedy, generate_softmax

__all__ = [
    "SUM_TOLERANCE",
    "TOUCHED_MASS_THRESHOLD",
    "UNIFORM_EXPLORATION_THRESHOLD",
    "BufferSpan",
    "ExplorationConfig",
    "ExplorationEngine",
    "ExplorationError",
    "ExplorationOutcome",
    "ExplorationStatus",
    "as_span",
    "check_status",
    "clamp_action",
    "enforce_minimum_probability",
    "generate_bag",
    "generate_epsilon_greedy",
    "generate_softmax",
    "is_valid_pdf",
    "pdf_total",
]
