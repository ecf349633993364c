"""
Fabric claim overlap report.

Main CLI that drives the pipeline:
  claims.txt -> parse -> accumulate overlaps -> print report (-> optional CSV)

Usage:
    python fabric_report.py input.txt
    python fabric_report.py input.txt -o claims.csv
    python fabric_report.py input.txt --config fabric_report.json --skip-malformed
    python fabric_report.py input.txt --cross-check -v
"""

import argparse
import csv
import sys
import time
from typing import List, Optional, Tuple

from claim_parser import Claim, ParseError, parse_claims
from coverage_grid import cross_check
from overlap_accumulator import OverlapAccumulator
from report_config import ReportConfig, default_report_config


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Count fabric cells claimed more than once"
    )
    parser.add_argument("input", nargs="?", default="input.txt",
                        help="Claims file, one '#id @ left,top: WxH' per line "
                             "(default: input.txt)")
    parser.add_argument("-o", "--output", default=None,
                        help="Optional CSV file with one row per claim id")
    parser.add_argument("--config", default=None,
                        help="Report config JSON file")
    parser.add_argument("--skip-malformed", action="store_true",
                        help="Skip malformed lines instead of aborting")
    parser.add_argument("--unsorted", action="store_true",
                        help="Do not sort non-overlapping claim ids")
    parser.add_argument("--cross-check", action="store_true",
                        help="Recount overlaps with a dense numpy grid")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Print progress info")
    return parser.parse_args(argv)


def read_claims(path: str, on_error: str = "abort") -> Tuple[List[Claim], int]:
    """Read claims from a file. Returns (claims, skipped_line_count).

    With on_error="abort" the first malformed line raises ParseError.
    """
    errors: List[ParseError] = []
    claims = parse_claims(path, on_error=on_error, errors=errors)
    for exc in errors:
        print(f"Warning: skipping {exc}")
    return claims, len(errors)


def build_report(claims: List[Claim]) -> OverlapAccumulator:
    """Ingest every claim into one accumulator and finalize it."""
    acc = OverlapAccumulator()
    acc.ingest_all(claims)
    acc.finalize()
    return acc


def format_report(acc: OverlapAccumulator, config: ReportConfig) -> str:
    ids = list(acc.non_overlapping_claim_ids())
    if config.sort_ids:
        ids.sort()
    return (
        f"Cells claimed more than once: {acc.duplicate_cell_count()}\n"
        f"Non-overlapping claim ids: {config.id_separator.join(str(i) for i in ids)}"
    )


def write_csv(acc: OverlapAccumulator, output_path: str):
    """Write one row per claim id with its overlap flag."""
    overlapping = acc.overlapping_claim_ids
    with open(output_path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(["claim_id", "overlapping"])
        for claim_id in sorted(acc.claim_ids):
            writer.writerow([claim_id, int(claim_id in overlapping)])


def main(argv: Optional[List[str]] = None):
    args = parse_args(argv)
    t0 = time.time()

    try:
        config = ReportConfig.from_json(args.config) if args.config else default_report_config()
    except ValueError as exc:
        print(f"Error: invalid config: {exc}")
        sys.exit(1)
    if args.skip_malformed:
        config.on_error = "skip"
    if args.unsorted:
        config.sort_ids = False
    if args.cross_check:
        config.cross_check = True

    # Step 1: Parse claims
    try:
        claims, skipped = read_claims(args.input, on_error=config.on_error)
    except ParseError as exc:
        print(f"Error: {exc}")
        sys.exit(1)
    if args.verbose:
        print(f"Parsed {len(claims)} claims ({skipped} skipped)")

    # Step 2: Accumulate overlaps
    acc = build_report(claims)
    if args.verbose:
        print(f"Covered {acc.covered_cell_count()} cells, "
              f"{len(acc.overlapping_claim_ids)} overlapping claims")

    # Step 3: Optional dense recount
    if config.cross_check:
        problems = cross_check(claims, acc)
        if problems:
            for p in problems:
                print(f"Error: cross-check: {p}")
            sys.exit(1)
        if args.verbose:
            print("Cross-check against dense grid passed")

    print(format_report(acc, config))

    # Step 4: Write output
    if args.output:
        write_csv(acc, args.output)
        print(f"Results written to {args.output}")
    if args.verbose:
        print(f"Total time: {time.time() - t0:.1f}s")


if __name__ == "__main__":
    main()
