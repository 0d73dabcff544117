"""PDF generators: epsilon-greedy, softmax, and ensemble bagging."""

from __future__ import annotations

import logging
from math import exp

from .contract import (
    ExplorationStatus,
    PdfBuffer,
    ScoreBuffer,
    VoteBuffer,
    as_span,
    clamp_action,
    reject,
)

LOGGER = logging.getLogger("bandit_exploration.engine.generators")


def generate_epsilon_greedy(epsilon: float, top_action: int, pdf: PdfBuffer) -> ExplorationStatus:
    """
    Fill `pdf` with an epsilon-greedy distribution:
      p[a] = epsilon / N + (1 - epsilon) * [a == top_action]
    `top_action` is clamped into the span. `epsilon` is used as given.
    """
    pdf_span = as_span(pdf)
    if not pdf_span.is_valid():
        return reject("epsilon_greedy", ExplorationStatus.BAD_RANGE, start=pdf_span.start, stop=pdf_span.stop)

    num_actions = pdf_span.length
    if num_actions == 0:
        return reject("epsilon_greedy", ExplorationStatus.EMPTY_DISTRIBUTION)

    top_action = clamp_action(top_action, num_actions)
    prob = epsilon / float(num_actions)

    buffer = pdf_span.buffer
    for index in pdf_span.indices:
        buffer[index] = prob
    buffer[pdf_span.start + top_action] += 1.0 - epsilon

    return ExplorationStatus.OK


def generate_softmax(lambda_: float, scores: ScoreBuffer, pdf: PdfBuffer) -> ExplorationStatus:
    """
    Fill `pdf` with softmax(lambda_ * scores), max-shifted for stability.

    Only the first min(len(scores), len(pdf)) positions are scored; any pdf
    slots past that are set to 0.
    """
    scores_span = as_span(scores)
    pdf_span = as_span(pdf)
    if not scores_span.is_valid() or not pdf_span.is_valid():
        return reject(
            "softmax",
            ExplorationStatus.BAD_RANGE,
            scores_valid=scores_span.is_valid(),
            pdf_valid=pdf_span.is_valid(),
        )

    num_actions = min(scores_span.length, pdf_span.length)
    if num_actions == 0:
        return reject(
            "softmax",
            ExplorationStatus.EMPTY_DISTRIBUTION,
            scores_len=scores_span.length,
            pdf_len=pdf_span.length,
        )

    score_values = scores_span.buffer
    buffer = pdf_span.buffer
    live = pdf_span.head(num_actions)

    for index in range(live.resolved_stop, pdf_span.resolved_stop):
        buffer[index] = 0.0

    # lambda_ * max(score) when lambda_ >= 0; also safe for negative lambda_.
    max_scaled = max(lambda_ * score_values[scores_span.start + offset] for offset in range(num_actions))

    norm = 0.0
    for offset, index in enumerate(live.indices):
        prob = exp(lambda_ * score_values[scores_span.start + offset] - max_scaled)
        norm += prob
        buffer[index] = prob

    for index in pdf_span.indices:
        buffer[index] /= norm

    return ExplorationStatus.OK


def generate_bag(vote_counts: VoteBuffer, pdf: PdfBuffer) -> ExplorationStatus:
    """
    Fill `pdf` with the vote share of each action across ensemble members.

    With no votes at all the whole mass goes to action 0. A pdf longer than
    `vote_counts` keeps whatever its tail held.
    """
    votes_span = as_span(vote_counts)
    pdf_span = as_span(pdf)
    if not pdf_span.is_valid() or not votes_span.is_valid():
        return reject(
            "bag",
            ExplorationStatus.BAD_RANGE,
            votes_valid=votes_span.is_valid(),
            pdf_valid=pdf_span.is_valid(),
        )

    if pdf_span.length == 0:
        return reject("bag", ExplorationStatus.EMPTY_DISTRIBUTION, votes_len=votes_span.length)

    counts = votes_span.buffer
    num_models = sum(counts[index] for index in votes_span.indices)
    buffer = pdf_span.buffer

    if num_models == 0:
        LOGGER.debug("bag_no_votes fallback_action=0 pdf_len=%s", pdf_span.length)
        buffer[pdf_span.start] = 1.0
        for index in range(pdf_span.start + 1, pdf_span.resolved_stop):
            buffer[index] = 0.0
        return ExplorationStatus.OK

    # Divide only after the full sum is known.
    total = float(num_models)
    for pdf_index, vote_index in zip(pdf_span.indices, votes_span.indices):
        buffer[pdf_index] = counts[vote_index] / total

    return ExplorationStatus.OK
