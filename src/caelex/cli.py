"""
Caelex CLI

Command-line interface for browsing rule packs and running assessments.

Usage:
    caelex packs
    caelex requirements UK-SIA-2018 --category safety
    caelex assess INT-COPUOS-IADC-2025 operator.yaml
    caelex assess EU-NIS2-2022 operator.json --json
    caelex unified copuos.yaml nis2.yaml uk.yaml

Input files for `assess` hold {profile, assessments}; input files for
`unified` additionally carry the pack_id they are assessed against.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

import yaml

from . import config
from .engine import ComplianceEngine
from .exceptions import AssessmentError, CaelexError
from .logging_config import configure_logging
from .models import AssessmentResult
from .unified import UnifiedScore, calculate_unified_score


# =============================================================================
# Helpers
# =============================================================================

def build_engine(packs_dir: str | Path) -> ComplianceEngine:
    engine = ComplianceEngine()
    engine.load_packs_from_directory(packs_dir)
    return engine


def load_input(path: str | Path) -> dict[str, Any]:
    """
    Read an assessment input file (YAML or JSON).

    Raises:
        AssessmentError: If the file is missing or not a mapping
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except OSError as e:
        raise AssessmentError(
            message=f"Cannot read input file: {path}",
            details={"path": str(path), "error": str(e)},
        ) from e
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise AssessmentError(
            message=f"Cannot parse input file: {path}",
            details={"path": str(path), "error": str(e)},
        ) from e

    if not isinstance(data, dict):
        raise AssessmentError(
            message=f"Input file must contain an object: {path}",
            details={"path": str(path)},
        )
    return data


def print_assessment(result: AssessmentResult) -> None:
    """Human-readable assessment report."""
    print("=" * 70)
    print(f"ASSESSMENT: {result.pack_id} (v{result.pack_version})")
    print("=" * 70)
    print()
    print(f"  Overall score:      {result.score.overall:>3}")
    print(f"  Mandatory score:    {result.score.mandatory:>3}")
    print(f"  Recommended score:  {result.score.recommended:>3}")
    print(f"  Risk level:         {result.risk_level.value.upper()}")
    print(f"  Reason:             {result.risk_reason}")
    print()

    summary = result.summary
    print(f"  Applicable: {summary.applicable_requirements} of {summary.total_requirements}")
    print(
        f"  Compliant {summary.compliant} | Partial {summary.partial} | "
        f"Non-compliant {summary.non_compliant} | Not assessed {summary.not_assessed}"
    )
    print()

    for dimension, groups in result.score.by_dimension.items():
        print(f"BY {dimension.upper()}")
        print("-" * 70)
        for group, score in groups.items():
            print(f"  {group:<50} {score:>5}")
        print()

    if result.group_reports:
        print(f"GROUPS ({result.group_reports[0].dimension})")
        print("-" * 70)
        for report in result.group_reports:
            risk = report.risk_level.value.upper() if report.risk_level else "-"
            print(
                f"  {report.group:<40} {report.score:>5}  {risk:<8} "
                f"{report.assessed}/{len(report.requirement_ids)} assessed, "
                f"{len(report.gaps)} gaps"
            )
        print()

    if result.gaps:
        print(f"GAPS ({len(result.gaps)})")
        print("-" * 70)
        for gap in result.gaps:
            print(f"  [{gap.priority.value.upper():<6}] {gap.gap}")
            print(f"           -> {gap.recommendation} (effort: {gap.estimated_effort.value})")
        print()

    if result.recommendations:
        print("RECOMMENDATIONS")
        print("-" * 70)
        for i, text in enumerate(result.recommendations, 1):
            print(f"  {i:>2}. {text}")
        print()

    if result.ignored_assessment_ids:
        print(f"Ignored assessments: {', '.join(result.ignored_assessment_ids)}")
        print()

    print("=" * 70)


def print_unified(unified: UnifiedScore) -> None:
    print("=" * 70)
    print(f"UNIFIED SCORE: {unified.overall} (grade {unified.grade.value}, {unified.status.value})")
    print("=" * 70)
    print()
    print(f"{'Module':<20} {'Score':>8} {'Weight':>8} {'Weighted':>10}  Status")
    print("-" * 70)
    for name, module in unified.breakdown.items():
        print(
            f"{name:<20} {module.score:>8} {module.weight:>8.2f} "
            f"{module.weighted_score:>10}  {module.status.value}"
        )
    print()

    if unified.recommendations:
        print("RECOMMENDATIONS")
        print("-" * 70)
        for rec in unified.recommendations:
            print(f"  [{rec.priority.value.upper():<8}] {rec.action} ({rec.reference})")
            print(f"             {rec.impact}, effort {rec.estimated_effort.value}")
        print()

    print("=" * 70)


# =============================================================================
# Commands
# =============================================================================

def cmd_packs(args: argparse.Namespace) -> int:
    """List loaded rule packs."""
    engine = build_engine(args.packs_dir)

    print(f"{'Pack':<24} {'Domain':<16} {'Jurisdiction':<13} {'Version':<10} {'Reqs':>5}")
    print("-" * 72)
    for pack in engine.list_packs(domain=args.domain):
        print(
            f"{pack.id:<24} {pack.domain.value:<16} {pack.jurisdiction:<13} "
            f"{pack.version:<10} {len(pack.requirements):>5}"
        )
    print()

    for path, error in engine.load_errors:
        print(f"  [FAIL] {path.name}: {error}", file=sys.stderr)

    return 1 if engine.load_errors else 0


def cmd_requirements(args: argparse.Namespace) -> int:
    """List the requirements of a pack."""
    engine = build_engine(args.packs_dir)
    pack = engine.get_pack_or_raise(args.pack_id)

    if args.category:
        requirements = engine.requirements_by_category(pack.id, args.category)
    else:
        requirements = pack.requirements

    print(f"{pack.name} ({pack.id})")
    print("=" * 70)
    print(f"{'ID':<24} {'Severity':<10} {'Binding':<14} Title")
    print("-" * 70)
    for r in requirements:
        print(f"{r.id:<24} {r.severity:<10} {r.binding_level.value:<14} {r.title}")
    print()
    print(f"{len(requirements)} requirements")

    return 0


def cmd_assess(args: argparse.Namespace) -> int:
    """Assess one profile against one pack."""
    engine = build_engine(args.packs_dir)
    data = load_input(args.input)

    result = engine.perform_assessment(
        args.pack_id,
        profile=data.get("profile", {}),
        assessments=data.get("assessments", []),
    )

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print_assessment(result)

    return 0


def cmd_unified(args: argparse.Namespace) -> int:
    """Combine several assessments into the unified score."""
    engine = build_engine(args.packs_dir)

    results = []
    for path in args.inputs:
        data = load_input(path)
        pack_id = data.get("pack_id")
        if not pack_id:
            raise AssessmentError(
                message=f"Input file has no pack_id: {path}",
                details={"path": str(path)},
            )
        results.append(engine.perform_assessment(
            pack_id,
            profile=data.get("profile", {}),
            assessments=data.get("assessments", []),
        ))

    unified = calculate_unified_score(results, engine.get_pack_or_raise)

    if args.json:
        print(json.dumps(unified.to_dict(), indent=2))
    else:
        print_unified(unified)

    return 0


# =============================================================================
# Entry Point
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Caelex space compliance CLI",
        prog="caelex",
    )
    parser.add_argument(
        "--packs-dir",
        default=str(config.CX_PACKS_DIR),
        help="Directory holding rule packs (default: CX_PACKS_DIR)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Log level for engine messages",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Packs command
    packs_parser = subparsers.add_parser("packs", help="List rule packs")
    packs_parser.add_argument("--domain", help="Only packs for this domain")
    packs_parser.set_defaults(func=cmd_packs)

    # Requirements command
    req_parser = subparsers.add_parser("requirements", help="List requirements of a pack")
    req_parser.add_argument("pack_id", help="Rule pack ID")
    req_parser.add_argument("--category", help="Only requirements in this category")
    req_parser.set_defaults(func=cmd_requirements)

    # Assess command
    assess_parser = subparsers.add_parser("assess", help="Assess a profile against a pack")
    assess_parser.add_argument("pack_id", help="Rule pack ID")
    assess_parser.add_argument("input", help="YAML/JSON file with profile and assessments")
    assess_parser.add_argument("--json", action="store_true", help="Print the full result as JSON")
    assess_parser.set_defaults(func=cmd_assess)

    # Unified command
    unified_parser = subparsers.add_parser("unified", help="Unified score across packs")
    unified_parser.add_argument("inputs", nargs="+", help="Input files, each with a pack_id")
    unified_parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    unified_parser.set_defaults(func=cmd_unified)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    configure_logging(level=args.log_level, fmt="text")

    try:
        return args.func(args)
    except CaelexError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
