"""CLI entrypoint: build one exploration PDF and print it as JSON."""

from __future__ import annotations

import argparse
import json
import logging
import os
from pathlib import Path
from typing import Sequence

from .config import (
    AppConfig,
    GeneratorKind,
    build_config,
    load_thresholds_from_env,
)
from .engine import ExplorationEngine, ExplorationOutcome, check_status

LOGGER = logging.getLogger("bandit_exploration")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Exploration PDF builder")
    parser.add_argument(
        "--generator",
        choices=[kind.value for kind in GeneratorKind],
        required=True,
        help="PDF generator: epsilon-greedy, softmax, or bag.",
    )
    parser.add_argument(
        "--num-actions",
        type=int,
        default=None,
        help="PDF length. Defaults to the number of scores/votes; required for epsilon-greedy.",
    )
    parser.add_argument("--epsilon", type=float, default=0.1, help="Uniform exploration mass.")
    parser.add_argument("--top-action", type=int, default=0, help="Preferred action for epsilon-greedy.")
    parser.add_argument("--scores", default=None, help="Comma separated action scores for softmax.")
    parser.add_argument(
        "--lambda",
        dest="lambda_",
        type=float,
        default=1.0,
        help="Softmax inverse temperature.",
    )
    parser.add_argument("--votes", default=None, help="Comma separated ensemble vote counts for bag.")
    parser.add_argument(
        "--min-prob",
        type=float,
        default=0.0,
        help="Total floor mass spread over actions after generation. 0 disables enforcement.",
    )
    parser.add_argument(
        "--keep-zero-elements",
        action="store_true",
        help="Leave zero-probability actions at zero when enforcing the floor.",
    )
    parser.add_argument("--log-level", default="WARNING", help="Python logging level name.")
    parser.add_argument("--log-file", type=Path, default=None, help="Optional log file path.")
    return parser


def configure_logging(config: AppConfig) -> None:
    level = logging.getLevelName(config.logging.level)
    if not isinstance(level, int):
        raise RuntimeError(f"Unknown log level: {config.logging.level}")
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if config.logging.log_file is not None:
        config.logging.log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(config.logging.log_file, encoding="utf-8"))
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        handlers=handlers,
    )


def run_once(args: argparse.Namespace, config: AppConfig) -> dict[str, object]:
    generator = GeneratorKind(args.generator)
    engine = ExplorationEngine(config.exploration_config())

    if generator == GeneratorKind.EPSILON_GREEDY:
        if args.num_actions is None:
            raise RuntimeError("--num-actions is required for epsilon-greedy.")
        pdf = _allocate_pdf(args.num_actions)
        outcome = engine.epsilon_greedy(pdf, epsilon=args.epsilon, top_action=args.top_action)
    elif generator == GeneratorKind.SOFTMAX:
        scores = _parse_float_list(args.scores, flag="--scores")
        pdf = _allocate_pdf(len(scores) if args.num_actions is None else args.num_actions)
        outcome = engine.softmax(pdf, scores=scores, lambda_=args.lambda_)
    else:
        votes = _parse_vote_list(args.votes)
        pdf = _allocate_pdf(len(votes) if args.num_actions is None else args.num_actions)
        outcome = engine.bag(pdf, vote_counts=votes)

    check_status(outcome.status, operation=f"{generator.value}/{outcome.stage}")
    LOGGER.info(
        "pdf_built generator=%s num_actions=%s enforced=%s total_mass=%s",
        generator.value,
        len(pdf),
        outcome.enforced,
        outcome.total_mass,
    )
    return _outcome_payload(generator, outcome, pdf)


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    try:
        config = build_config(
            min_prob=args.min_prob,
            update_zero_elements=not args.keep_zero_elements,
            log_level=args.log_level,
            log_file=args.log_file,
            thresholds=load_thresholds_from_env(os.environ),
        )
        configure_logging(config)
        result = run_once(args, config)
    except (RuntimeError, ValueError) as exc:
        print(json.dumps({"ok": False, "error": str(exc)}, ensure_ascii=True))
        return 1
    print(json.dumps({"ok": True, "result": result}, ensure_ascii=True))
    return 0


def _outcome_payload(
    generator: GeneratorKind,
    outcome: ExplorationOutcome,
    pdf: Sequence[float],
) -> dict[str, object]:
    return {
        "generator": generator.value,
        "status": outcome.status.name.lower(),
        "status_code": int(outcome.status),
        "enforced": outcome.enforced,
        "valid": outcome.is_valid,
        "pdf": [float(value) for value in pdf],
        "total_mass": outcome.total_mass,
    }


def _allocate_pdf(num_actions: int) -> list[float]:
    if num_actions < 0:
        raise RuntimeError("--num-actions must be non-negative.")
    return [0.0] * num_actions


def _parse_float_list(raw: str | None, *, flag: str) -> list[float]:
    if raw is None or not raw.strip():
        return []
    try:
        return [float(item) for item in raw.split(",") if item.strip()]
    except ValueError as exc:
        raise RuntimeError(f"{flag} must be a comma separated list of numbers.") from exc


def _parse_vote_list(raw: str | None) -> list[int]:
    if raw is None or not raw.strip():
        return []
    try:
        votes = [int(item) for item in raw.split(",") if item.strip()]
    except ValueError as exc:
        raise RuntimeError("--votes must be a comma separated list of integers.") from exc
    if any(vote < 0 for vote in votes):
        raise RuntimeError("--votes must be non-negative.")
    return votes


if __name__ == "__main__":
    raise SystemExit(main())
