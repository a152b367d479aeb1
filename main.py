#!/usr/bin/env python3
"""
Result Sheet Verifier — Entry Point
====================================

Verifies one result-sheet image against the demo registry and prints the verdict.

Usage:
    OPENAI_API_KEY=sk-... python main.py sheet.jpg
    OPENAI_API_KEY=sk-... python main.py sheet.jpg --csv results.csv

Exit codes: 0 genuine, 1 not genuine, 2 analysis failed.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from result_verifier.bulk_import import parse_results_csv
from result_verifier.config import get_settings
from result_verifier.exceptions import ExtractionError
from result_verifier.models import VerificationResult
from result_verifier.pipeline import VerificationPipeline
from result_verifier.registry import InMemoryRegistry, load_seed_records

load_dotenv()


# ─── ANSI Color Constants ───────────────────────────────────────────

_RED = "\033[91m"
_YELLOW = "\033[93m"
_GREEN = "\033[92m"
_CYAN = "\033[96m"
_DIM = "\033[2m"
_BOLD = "\033[1m"
_RESET = "\033[0m"
_WIDTH = 72


# ─── Pretty Printer ─────────────────────────────────────────────────


def _print_detected(result: VerificationResult) -> None:
    """Print what the AI read off the sheet."""
    data = result.detected_data
    print(f"  Academic:    {'yes' if data.is_academic_certificate else 'no'}")
    print(f"  Name:        {data.student_name or _DIM + '(not read)' + _RESET}")
    print(f"  Register No: {data.certificate_id or _DIM + '(not read)' + _RESET}")
    if data.institution:
        print(f"  Institution: {data.institution}")
    if data.graduation_year:
        print(f"  Year:        {data.graduation_year}")
    print(f"  Tampering:   {data.tampering_detected} (score {data.tampering_score:g})")


def _print_match(result: VerificationResult) -> None:
    record = result.matched_record
    if record is None:
        print(f"  {_DIM}No registry record matched.{_RESET}")
        return
    print(f"  {_CYAN}Matched record {record.id}{_RESET}")
    print(f"    {record.student_name}  |  {record.certificate_id}")
    print(f"    {record.degree_name}, {record.institution} ({record.graduation_year})")
    if record.result_status:
        print(f"    Result: {record.result_status}")


def print_result(result: VerificationResult) -> int:
    """Pretty-print the verdict with ANSI color codes.

    Returns:
        0 if genuine, 1 otherwise.
    """
    print(f"\n{'=' * _WIDTH}")
    print(f"{_BOLD}{_CYAN}  RESULT SHEET VERIFICATION{_RESET}")
    print(f"{'=' * _WIDTH}")
    _print_detected(result)
    print(f"{'─' * _WIDTH}")
    _print_match(result)
    print(f"{'─' * _WIDTH}")
    print(f"  Notes: {result.analysis_notes}")
    print(f"{'=' * _WIDTH}")

    if result.is_genuine:
        print(f"  {_GREEN}{_BOLD}GENUINE  --  confidence {result.confidence_score}%{_RESET}")
    elif result.tampering_detected:
        print(f"  {_YELLOW}{_BOLD}TAMPERING SUSPECTED  --  confidence {result.confidence_score}%{_RESET}")
    else:
        print(f"  {_RED}{_BOLD}NOT VERIFIED  --  confidence {result.confidence_score}%{_RESET}")
    print(f"{'=' * _WIDTH}\n")

    return 0 if result.is_genuine else 1


# ─── Main ────────────────────────────────────────────────────────────


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Verify a result-sheet image.")
    parser.add_argument("image", type=Path, help="Photo or scan of the result sheet")
    parser.add_argument("--csv", type=Path, help="Extra registry records to import first")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    settings = get_settings()
    registry = InMemoryRegistry(
        load_seed_records(settings.seed_path) if settings.seed_path else []
    )
    if args.csv:
        registry.extend(parse_results_csv(args.csv.read_text(encoding="utf-8-sig")))

    pipeline = VerificationPipeline(registry, exclude_revoked=settings.exclude_revoked)

    print("\n  Analyzing result sheet...\n")
    try:
        result = pipeline.run(args.image.read_bytes())
    except ExtractionError as e:
        print(f"  {_RED}{_BOLD}Analysis failed:{_RESET} {e}")
        print("  Please ensure the Register Number (USN) is clear and try again.\n")
        return 2

    return print_result(result)


if __name__ == "__main__":
    sys.exit(main())
