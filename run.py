#!/usr/bin/env python3
"""
Core Extraction Runner

Extract the core documents for a seed and print serendipitous recommendations.

Usage:
    python run.py 3                        # Seed document 3, 10 recommendations
    python run.py 3 -n 25                  # 25 recommendations
    python run.py 3 --data-dir corpora/x   # Read corpus.jsonl from another directory
    python run.py 3 --slice 2024-q1        # Record under a data slice
    python run.py 3 --no-store --compare   # Dry run with per-promotion comparisons
    python run.py --list                   # List stored assignments

Exits with status 1 when the run aborts (unknown seed, empty pool, ...).
"""

import sys
import argparse
from pathlib import Path

from rich.console import Console
from rich.table import Table

from config import DATA_DIR, load_settings
from extractor import CoreExtractionError, EventEmitter, run_extraction
from extractor.reporting import ConsoleReporter
from repositories import configure_backend, get_repository

console = Console()


def list_assignments(repository):
    """Print stored core assignments"""
    assignments = repository.assignments.list()
    if not assignments:
        console.print("No stored assignments")
        return

    table = Table(title="Stored assignments")
    table.add_column("Slice")
    table.add_column("Seed", justify="right")
    table.add_column("Core size", justify="right")
    table.add_column("Variant")
    table.add_column("Updated")
    for a in assignments:
        table.add_row(
            a.data_slice,
            str(a.seed_id),
            str(a.size),
            "advanced" if a.advanced else "simple",
            a.updated_at.strftime("%Y-%m-%d %H:%M"),
        )
    console.print(table)


def build_parser():
    parser = argparse.ArgumentParser(description="Core Extraction Runner")
    parser.add_argument("seed", type=int, nargs="?",
                        help="Seed document id")
    parser.add_argument("-n", "--recommendations", type=int, default=10,
                        help="Number of serendipitous documents to return (default 10)")
    parser.add_argument("-d", "--data-dir", type=Path, default=DATA_DIR,
                        help="Directory holding corpus.jsonl and assignments/")
    parser.add_argument("-c", "--config", type=Path, default=None,
                        help="Settings YAML (default extraction.yaml)")
    parser.add_argument("-s", "--slice", dest="data_slice", default=None,
                        help="Data slice identifier to record the result under")
    parser.add_argument("-t", "--threads", type=int, default=None,
                        help="Evaluator thread count")
    parser.add_argument("--threshold", type=float, default=None,
                        help="Entropy delta convergence threshold")
    parser.add_argument("--no-store", action="store_true",
                        help="Do not persist the core assignment")
    parser.add_argument("--compare", action="store_true",
                        help="Print core/candidate feature comparison per promotion")
    parser.add_argument("--seed-rank", action="store_true",
                        help="Report how many documents outrank the seed under the final core")
    parser.add_argument("-q", "--quiet", action="store_true",
                        help="Only print stages, failures and results")
    parser.add_argument("-l", "--list", action="store_true",
                        help="List stored assignments")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_backend("json", args.data_dir)
    repository = get_repository()

    if args.list:
        list_assignments(repository)
        return 0

    if args.seed is None:
        parser.error("a seed document id is required")

    overrides = {
        "data_slice": args.data_slice,
        "num_threads": args.threads,
        "entropy_threshold": args.threshold,
    }
    if args.no_store:
        overrides["store_data"] = False
    if args.compare:
        overrides["print_comparison"] = True
    if args.quiet:
        overrides["print_initial_document"] = False
        overrides["print_core_titles"] = False
    settings = load_settings(args.config, **overrides)

    emitter = EventEmitter()
    emitter.add_callback(ConsoleReporter(settings, console))

    try:
        result = run_extraction(
            args.seed,
            args.recommendations,
            repository,
            settings=settings,
            emitter=emitter,
            report_seed_rank=args.seed_rank,
        )
    except CoreExtractionError:
        return 1

    console.print(f"Core size: {len(result.core_ids)}  promotions: {len(result.promotions)}")
    if result.seed_rank is not None:
        console.print(f"There are {result.seed_rank} documents with a higher probability than {args.seed}")
    if result.failed_evaluations:
        console.print(f"[yellow]{result.failed_evaluations} candidate evaluation(s) failed during the run[/yellow]")
    return 0


if __name__ == "__main__":
    sys.exit(main())
