"""
Caelex Compliance Engine

Loads, manages and queries rule packs, and runs assessments against
them.

Key features:
- Load rule packs from YAML/JSON files and directories
- Cache packs and their content hashes
- Query packs by domain or jurisdiction
- Validate profiles, filter applicable requirements and run the full
  scoring / risk / gap / recommendation pipeline
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from .. import config
from ..canon import compute_rule_pack_hash
from ..exceptions import (
    AssessmentError,
    CaelexError,
    RulePackLoadError,
    RulePackNotFoundError,
    UnknownRequirementError,
)
from ..models import (
    AssessmentResult,
    ComplianceScore,
    ComplianceStatus,
    ComplianceSummary,
    GapItem,
    RegulatoryDomain,
    Requirement,
    RequirementAssessment,
    RulePack,
)
from ..packs import RulePackLoader
from ..profiles import profile_extras, validate_profile
from .applicability import ApplicabilityFilter
from .condition_evaluator import ConditionEvaluator, resolve_field_path
from .gaps import analyze_gaps
from .recommendations import build_recommendations
from .reporting import (
    build_checklist,
    build_group_reports,
    build_summary,
    cross_reference_summary,
    eu_space_act_overlaps,
    requirements_for_article,
)
from .risk import classify_risk
from .scoring import calculate_scores, status_of

logger = logging.getLogger(__name__)

AssessmentInput = Union[RequirementAssessment, Mapping[str, Any]]


# =============================================================================
# Rule Context
# =============================================================================

def build_rule_context(
    pack: RulePack,
    profile: Mapping[str, Any],
    score: ComplianceScore,
    summary: ComplianceSummary,
    gaps: list[GapItem],
    overlaps: Optional[list[str]] = None,
) -> dict[str, Any]:
    """
    Context that risk and recommendation rules are evaluated against.

    Paths available to conditions:
        profile.<field>
        scores.overall / scores.mandatory / scores.recommended
        scores.by_<dimension>.<group>
        gaps.<severity>           gap count per severity (0 when none)
        gaps.total
        gaps.categories           categories with at least one gap
        gaps.requirement_ids
        eu_space_act_overlaps     referenced EU Space Act articles
    """
    scores: dict[str, Any] = {
        "overall": score.overall,
        "mandatory": score.mandatory,
        "recommended": score.recommended,
    }
    for dimension, groups in score.by_dimension.items():
        scores[f"by_{dimension}"] = dict(groups)

    gap_counts: dict[str, Any] = {severity: 0 for severity in pack.severity_weights}
    gap_counts.update(summary.gaps_by_severity)
    gap_counts["total"] = len(gaps)
    gap_counts["categories"] = sorted({g.category for g in gaps})
    gap_counts["requirement_ids"] = [g.requirement_id for g in gaps]

    return {
        "profile": profile,
        "scores": scores,
        "gaps": gap_counts,
        "eu_space_act_overlaps": list(overlaps or []),
    }


# =============================================================================
# Compliance Engine
# =============================================================================

@dataclass
class ComplianceEngine:
    """
    Loads rule packs and performs compliance assessments.

    Usage:
        engine = ComplianceEngine()
        engine.load_packs_from_directory(config.CX_PACKS_DIR)

        result = engine.perform_assessment(
            "INT-COPUOS-IADC-2025",
            profile={"orbit_regime": "LEO", "mission_type": "commercial",
                     "satellite_mass_kg": 4},
            assessments=[{"requirement_id": "iadc-5.3.2-leo", "status": "compliant"}],
        )
        print(result.score.overall, result.risk_level)
    """

    _loader: RulePackLoader = field(
        default_factory=lambda: RulePackLoader(strict_version=config.CX_STRICT_SCHEMA)
    )
    _evaluator: ConditionEvaluator = field(default_factory=ConditionEvaluator)

    # Caches
    _packs: dict[str, RulePack] = field(default_factory=dict)
    _pack_hashes: dict[str, str] = field(default_factory=dict)
    _load_errors: list[tuple[Path, CaelexError]] = field(default_factory=list)

    # =========================================================================
    # Pack management
    # =========================================================================

    def load_pack(self, path: Union[str, Path]) -> RulePack:
        """
        Load a rule pack from a file and cache it.

        Raises:
            RulePackLoadError: If file cannot be loaded
            RulePackValidationError: If validation fails
        """
        return self.add_pack(self._loader.load(path))

    def add_pack(self, pack: RulePack) -> RulePack:
        """Cache an already-built pack, replacing any pack with the same ID."""
        self._packs[pack.id] = pack
        self._pack_hashes[pack.id] = compute_rule_pack_hash(pack)
        return pack

    def load_packs_from_directory(
        self,
        directory: Union[str, Path],
        pattern: str = "*.yaml",
    ) -> list[RulePack]:
        """
        Load all rule packs from a directory.

        Files that fail to load are logged and recorded in load_errors;
        the remaining packs are still loaded. JSON files are picked up
        alongside the default YAML pattern.
        """
        directory = Path(directory)
        if not directory.is_dir():
            raise RulePackLoadError(
                message=f"Directory not found: {directory}",
                details={"path": str(directory)},
            )

        paths = sorted(directory.glob(pattern))
        if pattern == "*.yaml":
            paths += sorted(directory.glob("*.json"))

        packs = []
        for path in paths:
            if not path.is_file():
                continue
            try:
                packs.append(self.load_pack(path))
            except CaelexError as e:
                logger.error("Failed to load rule pack %s: %s", path.name, e)
                self._load_errors.append((path, e))
        return packs

    @property
    def load_errors(self) -> list[tuple[Path, CaelexError]]:
        return list(self._load_errors)

    def get_pack(self, pack_id: str) -> Optional[RulePack]:
        return self._packs.get(pack_id)

    def get_pack_or_raise(self, pack_id: str) -> RulePack:
        """
        Get a pack by ID, raising if not found.

        Raises:
            RulePackNotFoundError: If pack not loaded
        """
        pack = self.get_pack(pack_id)
        if pack is None:
            raise RulePackNotFoundError(
                message=f"Rule pack not found: {pack_id}",
                details={"pack_id": pack_id, "available": list(self._packs.keys())},
            )
        return pack

    def get_pack_for_domain(self, domain: Union[RegulatoryDomain, str]) -> RulePack:
        """
        Most recent pack (by effective date) serving a domain.

        Raises:
            RulePackNotFoundError: If no pack serves the domain
        """
        candidates = self.list_packs(domain=domain)
        if not candidates:
            raise RulePackNotFoundError(
                message=f"No rule pack loaded for domain: {domain}",
                details={"domain": str(getattr(domain, "value", domain))},
            )
        return max(candidates, key=lambda p: p.effective_date)

    def list_packs(
        self,
        domain: Optional[Union[RegulatoryDomain, str]] = None,
        jurisdiction: Optional[str] = None,
    ) -> list[RulePack]:
        """List packs with optional filters, sorted by domain then ID."""
        domain_value = getattr(domain, "value", domain)
        results = []
        for pack in self._packs.values():
            if domain_value and pack.domain.value != domain_value:
                continue
            if jurisdiction and pack.jurisdiction.upper() != jurisdiction.upper():
                continue
            results.append(pack)
        results.sort(key=lambda p: (p.domain.value, p.id))
        return results

    def pack_hash(self, pack_id: str) -> str:
        self.get_pack_or_raise(pack_id)
        return self._pack_hashes[pack_id]

    @property
    def pack_ids(self) -> list[str]:
        return list(self._packs.keys())

    def clear(self) -> None:
        """Clear all cached packs."""
        self._packs.clear()
        self._pack_hashes.clear()
        self._load_errors.clear()
        self._loader = RulePackLoader(strict_version=config.CX_STRICT_SCHEMA)

    # =========================================================================
    # Requirement queries
    # =========================================================================

    def requirement_by_id(self, pack_id: str, requirement_id: str) -> Requirement:
        """
        Raises:
            RulePackNotFoundError: If pack not loaded
            UnknownRequirementError: If the pack has no such requirement
        """
        pack = self.get_pack_or_raise(pack_id)
        requirement = pack.get_requirement(requirement_id)
        if requirement is None:
            raise UnknownRequirementError(
                message=f"Requirement not found: {requirement_id}",
                details={"requirement_id": requirement_id},
                pack_id=pack_id,
            )
        return requirement

    def requirements_by_category(self, pack_id: str, category: str) -> list[Requirement]:
        pack = self.get_pack_or_raise(pack_id)
        return [r for r in pack.requirements if r.category == category]

    def requirements_for_article(self, article: str) -> dict[str, list[Requirement]]:
        """Requirements in all packs referencing an EU Space Act article, by source."""
        return requirements_for_article(self.list_packs(), article)

    def cross_reference_summary(
        self,
        pack_id: str,
        profile: Optional[Mapping[str, Any]] = None,
    ) -> dict[str, object]:
        """
        Overlap counts with the EU Space Act.

        With a profile, only the applicable requirements are counted.
        """
        pack = self.get_pack_or_raise(pack_id)
        if profile is None:
            requirements = pack.requirements
        else:
            requirements = self.applicable_requirements(
                pack, self.validate_profile(pack.domain, profile)
            )
        return cross_reference_summary(requirements)

    # =========================================================================
    # Assessment
    # =========================================================================

    def validate_profile(
        self,
        domain: Union[RegulatoryDomain, str],
        data: Mapping[str, Any],
    ) -> dict[str, Any]:
        """Validated profile with derived fields."""
        return validate_profile(domain, data)

    def applicable_requirements(
        self,
        pack: Union[RulePack, str],
        profile: Mapping[str, Any],
    ) -> list[Requirement]:
        """Requirements of the pack that apply to an already-validated profile."""
        if isinstance(pack, str):
            pack = self.get_pack_or_raise(pack)
        return ApplicabilityFilter(self._evaluator).filter(pack, profile)

    def perform_assessment(
        self,
        pack_id: str,
        profile: Mapping[str, Any],
        assessments: Optional[Sequence[AssessmentInput]] = None,
    ) -> AssessmentResult:
        """
        Run a full assessment.

        Args:
            pack_id: Rule pack to assess against
            profile: Raw operator profile for the pack's domain
            assessments: Self-assessed statuses (RequirementAssessment or dicts)

        Returns:
            AssessmentResult

        Raises:
            RulePackNotFoundError: If pack not loaded
            ProfileValidationError: If the profile is malformed
            AssessmentError: If an assessment entry is malformed
        """
        started = time.perf_counter()
        pack = self.get_pack_or_raise(pack_id)
        validated = self.validate_profile(pack.domain, profile)
        statuses, ignored = self._collect_statuses(pack, assessments or [])

        applicable = self.applicable_requirements(pack, validated)
        effective = {r.id: status_of(r, statuses) for r in applicable}

        score = calculate_scores(pack, applicable, effective)
        gaps = analyze_gaps(pack, applicable, effective)
        summary = build_summary(pack, applicable, effective)
        overlaps = eu_space_act_overlaps(applicable)

        context = build_rule_context(pack, validated, score, summary, gaps, overlaps)
        risk = classify_risk(pack, applicable, effective, score, context, self._evaluator)
        recommendations = build_recommendations(pack, gaps, context, self._evaluator)

        result = AssessmentResult(
            pack_id=pack.id,
            pack_version=pack.version,
            pack_hash=self._pack_hashes[pack.id],
            domain=pack.domain,
            profile=validated,
            applicable_requirement_ids=[r.id for r in applicable],
            score=score,
            risk_level=risk.level,
            risk_reason=risk.reason,
            gaps=gaps,
            recommendations=recommendations,
            summary=summary,
            checklist=build_checklist(applicable, effective),
            eu_space_act_overlaps=overlaps,
            group_reports=build_group_reports(
                pack, applicable, effective, gaps, self._report_groups(pack, validated)
            ),
            extras=profile_extras(pack.domain, validated, applicable),
            ignored_assessment_ids=ignored,
            requirement_statuses=effective,
        )

        logger.info(
            "Assessment complete for %s: score %d, risk %s, %d gaps",
            pack.id, score.overall, risk.level.value, len(gaps),
            extra={
                "pack_id": pack.id,
                "domain": pack.domain.value,
                "overall_score": score.overall,
                "risk_level": risk.level.value,
                "pack_hash_short": result.pack_hash[:12],
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
            },
        )
        return result

    def _report_groups(
        self,
        pack: RulePack,
        profile: Mapping[str, Any],
    ) -> Optional[list[str]]:
        if not pack.report_groups_from:
            return None
        value, found = resolve_field_path(profile, pack.report_groups_from)
        if not found or value is None:
            return []
        if isinstance(value, (list, tuple)):
            return [str(v) for v in value]
        return [str(value)]

    def _collect_statuses(
        self,
        pack: RulePack,
        assessments: Iterable[AssessmentInput],
    ) -> tuple[dict[str, ComplianceStatus], list[str]]:
        """
        Requirement ID to status; the first assessment of an ID wins.

        Returns:
            Tuple of (statuses, ignored requirement IDs)
        """
        known = set(pack.requirement_ids)
        statuses: dict[str, ComplianceStatus] = {}
        ignored: list[str] = []

        for index, entry in enumerate(assessments):
            requirement_id, status = _parse_assessment(entry, index)
            if requirement_id not in known:
                logger.warning(
                    "Ignoring assessment for unknown requirement %s",
                    requirement_id,
                    extra={"pack_id": pack.id, "requirement_id": requirement_id},
                )
                ignored.append(requirement_id)
                continue
            if requirement_id in statuses:
                logger.warning(
                    "Duplicate assessment for %s ignored; first one wins",
                    requirement_id,
                    extra={"pack_id": pack.id, "requirement_id": requirement_id},
                )
                continue
            statuses[requirement_id] = status

        return statuses, ignored


def _parse_assessment(entry: AssessmentInput, index: int) -> tuple[str, ComplianceStatus]:
    if isinstance(entry, RequirementAssessment):
        return entry.requirement_id, ComplianceStatus(entry.status)

    if not isinstance(entry, Mapping):
        raise AssessmentError(
            message=f"Assessment #{index} must be an object",
            details={"index": index, "type": type(entry).__name__},
        )

    requirement_id = entry.get("requirement_id")
    if not isinstance(requirement_id, str) or not requirement_id:
        raise AssessmentError(
            message=f"Assessment #{index} is missing requirement_id",
            details={"index": index},
        )

    raw_status = entry.get("status", ComplianceStatus.NOT_ASSESSED.value)
    try:
        status = ComplianceStatus(raw_status)
    except ValueError as e:
        raise AssessmentError(
            message=f"Invalid status '{raw_status}' for {requirement_id}",
            details={
                "index": index,
                "requirement_id": requirement_id,
                "allowed": [s.value for s in ComplianceStatus],
            },
        ) from e
    return requirement_id, status


# =============================================================================
# Module-level Engine Instance
# =============================================================================

_default_engine: Optional[ComplianceEngine] = None


def get_default_engine() -> ComplianceEngine:
    """
    Get or create the default engine, loading packs from CX_PACKS_DIR.
    """
    global _default_engine
    if _default_engine is None:
        _default_engine = ComplianceEngine()
        _default_engine.load_packs_from_directory(config.CX_PACKS_DIR)
    return _default_engine
