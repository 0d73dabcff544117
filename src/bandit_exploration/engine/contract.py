"""Shared PDF buffer contract: status codes, spans, and validation helpers."""

from __future__ import annotations

import logging
from collections.abc import MutableSequence, Sequence
from dataclasses import dataclass
from enum import IntEnum
from math import isclose
from typing import Any

LOGGER = logging.getLogger("bandit_exploration.engine")

UNIFORM_EXPLORATION_THRESHOLD = 0.999
TOUCHED_MASS_THRESHOLD = 0.999
SUM_TOLERANCE = 1e-6


class ExplorationStatus(IntEnum):
    OK = 0
    BAD_RANGE = 1
    EMPTY_DISTRIBUTION = 2


class ExplorationError(ValueError):
    """Raised by `check_status` for callers that prefer exceptions."""

    def __init__(self, status: ExplorationStatus, operation: str = "") -> None:
        self.status = ExplorationStatus(status)
        self.operation = operation
        label = f"{operation}: " if operation else ""
        super().__init__(f"{label}{self.status.name.lower()} (status={int(self.status)})")


@dataclass(frozen=True, eq=False)
class BufferSpan:
    """Half-open [start, stop) view over a caller-owned buffer.

    `stop=None` means the end of the buffer. The span is only a description;
    nothing is copied.
    """

    buffer: Sequence[Any]
    start: int = 0
    stop: int | None = None

    @property
    def resolved_stop(self) -> int:
        return len(self.buffer) if self.stop is None else self.stop

    def is_valid(self) -> bool:
        stop = self.resolved_stop
        return 0 <= self.start <= stop <= len(self.buffer)

    @property
    def length(self) -> int:
        return self.resolved_stop - self.start

    @property
    def indices(self) -> range:
        return range(self.start, self.resolved_stop)

    def head(self, length: int) -> BufferSpan:
        """Sub-span holding the first `length` positions."""
        return BufferSpan(self.buffer, self.start, self.start + length)


PdfBuffer = MutableSequence[float] | BufferSpan
ScoreBuffer = Sequence[float] | BufferSpan
VoteBuffer = Sequence[int] | BufferSpan


def as_span(value: Sequence[Any] | BufferSpan) -> BufferSpan:
    if isinstance(value, BufferSpan):
        return value
    return BufferSpan(value)


def clamp_action(action: int, num_actions: int) -> int:
    """Clamp an action index into [0, num_actions - 1]."""
    if action >= num_actions:
        return num_actions - 1
    if action < 0:
        return 0
    return int(action)


def pdf_total(pdf: Sequence[float] | BufferSpan) -> float:
    span = as_span(pdf)
    return float(sum(span.buffer[i] for i in span.indices))


def is_valid_pdf(pdf: Sequence[float] | BufferSpan, *, tolerance: float = SUM_TOLERANCE) -> bool:
    """True when the span is non-empty, non-negative and sums to 1 within tolerance."""
    _validate_positive("tolerance", tolerance)
    span = as_span(pdf)
    if not span.is_valid() or span.length == 0:
        return False
    if any(span.buffer[i] < 0.0 for i in span.indices):
        return False
    return isclose(pdf_total(span), 1.0, rel_tol=0.0, abs_tol=tolerance)


def check_status(status: ExplorationStatus | int, *, operation: str = "") -> ExplorationStatus:
    resolved = ExplorationStatus(status)
    if resolved != ExplorationStatus.OK:
        raise ExplorationError(resolved, operation)
    return resolved


def reject(operation: str, status: ExplorationStatus, **details: object) -> ExplorationStatus:
    """Log a rejected call at DEBUG and hand back its status."""
    if LOGGER.isEnabledFor(logging.DEBUG):
        extra = " ".join(f"{key}={value}" for key, value in details.items())
        LOGGER.debug("%s_rejected status=%s %s", operation, status.name, extra)
    return status


def _validate_positive(name: str, value: float) -> None:
    if value <= 0.0:
        raise ValueError(f"{name} must be > 0, got {value}")
