"""Minimum-probability floor enforcement over an existing PDF."""

from __future__ import annotations

import logging

from .contract import (
    TOUCHED_MASS_THRESHOLD,
    UNIFORM_EXPLORATION_THRESHOLD,
    BufferSpan,
    ExplorationStatus,
    PdfBuffer,
    as_span,
    reject,
)

LOGGER = logging.getLogger("bandit_exploration.engine.enforcer")


def enforce_minimum_probability(
    min_prob: float,
    update_zero_elements: bool,
    pdf: PdfBuffer,
    *,
    uniform_threshold: float = UNIFORM_EXPLORATION_THRESHOLD,
    touched_mass_threshold: float = TOUCHED_MASS_THRESHOLD,
) -> ExplorationStatus:
    """
    Raise every eligible action to at least min_prob / N, in place.

    An action is eligible when its probability is positive, or zero and
    `update_zero_elements` is set. Eligible actions at or below the floor are
    "touched" and set to the floor; the remaining ("untouched") mass is
    rescaled so the PDF still sums to 1.

    min_prob above `uniform_threshold` switches to uniform exploration over
    the eligible support.
    """
    pdf_span = as_span(pdf)
    if not pdf_span.is_valid():
        return reject("enforce_minimum_probability", ExplorationStatus.BAD_RANGE, start=pdf_span.start, stop=pdf_span.stop)

    num_actions = pdf_span.length
    if num_actions == 0:
        return reject("enforce_minimum_probability", ExplorationStatus.EMPTY_DISTRIBUTION)

    if min_prob > uniform_threshold:
        _apply_uniform(pdf_span, update_zero_elements)
        return ExplorationStatus.OK

    buffer = pdf_span.buffer
    floor = min_prob / float(num_actions)
    touched: list[int] = []
    untouched: list[int] = []
    untouched_mass = 0.0

    for index in pdf_span.indices:
        prob = buffer[index]
        if _is_eligible(prob, update_zero_elements) and prob <= floor:
            buffer[index] = floor
            touched.append(index)
        else:
            untouched.append(index)
            untouched_mass += prob

    touched_mass = floor * len(touched)
    if touched_mass <= 0.0:
        return ExplorationStatus.OK

    if touched_mass > touched_mass_threshold:
        capped_floor = (1.0 - untouched_mass) / float(len(touched))
        LOGGER.debug(
            "min_prob_floor_capped floor=%s capped_floor=%s touched=%s",
            floor,
            capped_floor,
            len(touched),
        )
        for index in touched:
            buffer[index] = capped_floor
        return ExplorationStatus.OK

    if untouched_mass <= 0.0:
        # Nothing left to rescale.
        LOGGER.debug("min_prob_no_untouched_mass touched=%s floor=%s", len(touched), floor)
        return ExplorationStatus.OK

    ratio = (1.0 - touched_mass) / untouched_mass
    for index in untouched:
        buffer[index] *= ratio

    return ExplorationStatus.OK


def _apply_uniform(pdf_span: BufferSpan, update_zero_elements: bool) -> None:
    buffer = pdf_span.buffer
    support = [index for index in pdf_span.indices if update_zero_elements or buffer[index] > 0.0]
    if not support:
        LOGGER.debug("uniform_exploration_empty_support pdf_len=%s", pdf_span.length)
        return

    prob = 1.0 / float(len(support))
    for index in support:
        buffer[index] = prob


def _is_eligible(prob: float, update_zero_elements: bool) -> bool:
    return prob > 0.0 or (prob == 0.0 and update_zero_elements)
