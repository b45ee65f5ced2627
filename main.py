"""
Main execution module for the essay scoring application.

This module serves as the command-line entry point: it reads an essay from a file
(or stdin), loads the embedding model once, scores the essay and prints the result
either as a Rich table or as JSON.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table

from app_types import EssayScore
from embedding_model import EmbeddingModelService
from errors import ModelLoadFailure, ScoringFailure
from score import EssayScorer
from settings import settings

logger = logging.getLogger(__name__)

BAND_STYLES = {"excellent": "green", "good": "blue", "fair": "yellow", "poor": "red"}


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the `essay-score` command."""
    parser = argparse.ArgumentParser(description="Score an essay for coherence, grammar and structure.")
    parser.add_argument("path", help="Path to a UTF-8 text file with the essay, or '-' to read stdin.")
    parser.add_argument(
        "--model",
        default=settings.embedding.model_name,
        help="SentenceTransformer model name or path.",
    )
    parser.add_argument(
        "--device",
        default=settings.embedding.device,
        choices=["cpu", "cuda", "mps"],
        help="Device to run the embedding model on.",
    )
    parser.add_argument("--json", action="store_true", help="Print the score record as JSON.")
    parser.add_argument("--log-level", default=None, help="Override the log level (e.g. DEBUG).")
    return parser


def read_essay(path: str) -> str:
    """Read the essay text from `path`, or from stdin when `path` is '-'."""
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def render_score(essay_score: EssayScore, console: Console) -> None:
    """Print an `EssayScore` as a table followed by its feedback."""
    table = Table(title="Essay Score Analysis")
    table.add_column("Dimension")
    table.add_column("Score", justify="right")
    table.add_column("Band")

    percentages = essay_score.as_percentages()
    for dimension, band in essay_score.bands().items():
        style = BAND_STYLES[band]
        table.add_row(dimension.title(), f"[{style}]{percentages[dimension]}%[/{style}]", band)

    console.print(table)
    console.print(essay_score.feedback)
    for warning in essay_score.warnings:
        console.print(f"[yellow]Warning:[/yellow] {warning}")


def main(argv: Optional[list[str]] = None) -> int:
    """
    Run the essay scoring command.

    Args:
        argv (Optional[list[str]]): Command-line arguments; `sys.argv[1:]` when omitted.

    Returns:
        int: Process exit code, 0 on success and 1 on failure.
    """
    args = build_parser().parse_args(argv)
    if args.log_level:
        logging.getLogger().setLevel(args.log_level.upper())

    try:
        text = read_essay(args.path)
    except OSError:
        logger.exception(f"Could not read essay from {args.path}")
        return 1

    service = EmbeddingModelService(
        model_name=args.model,
        device=args.device,
        batch_size=settings.embedding.batch_size,
        normalize_embeddings=settings.embedding.normalize_embeddings,
    )
    scorer = EssayScorer(
        service,
        settings.scoring,
        clamp_negative_similarity=settings.embedding.clamp_negative_similarity,
    )

    try:
        service.load()
        essay_score = scorer.score(text)
    except ModelLoadFailure:
        logger.error("The essay scoring model could not be loaded.")
        return 1
    except ScoringFailure:
        logger.error("The essay could not be scored.")
        return 1

    if args.json:
        print(essay_score.model_dump_json(indent=2))
    else:
        render_score(essay_score, Console())
    return 0


if __name__ == "__main__":
    sys.exit(main())
