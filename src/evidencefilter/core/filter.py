"""Evidence-based filtering of candidate transcript alignments.

Candidates are grouped by the evidence sequence they were aligned from,
ranked by alignment quality within each group, and accepted when they are
at (or near) the best coverage of their group and pass the coverage and
identity thresholds. Optionally, unspliced lower-ranked alignments are
rejected when the best alignment of the group is spliced, since those are
likely processed pseudogenes.

Example:
    >>> from evidencefilter.config import FilterConfig
    >>> from evidencefilter.core.filter import EvidenceFilter
    >>>
    >>> evidence_filter = EvidenceFilter(FilterConfig.best_in_genome_profile())
    >>> accepted = evidence_filter.filter(candidates)
    >>>
    >>> # Or keep every decision for reporting
    >>> result = evidence_filter.apply(candidates)
    >>> print(f"Accepted: {result.accept_count}/{result.total_count}")
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

import attrs

from evidencefilter.config import (
    NEAR_BEST_FRACTION,
    PREFILTER_MIN_COVERAGE,
    PREFILTER_MIN_PERCENT,
    RELAXED_COVERAGE_FACTOR,
    RELAXED_PERCENT_FACTOR,
    FilterConfig,
)
from evidencefilter.core.candidates import Candidate

logger = logging.getLogger(__name__)
trace_logger = logging.getLogger("evidencefilter.trace")

# =============================================================================
# Constants
# =============================================================================

LABEL_BEST = "best_match"
LABEL_PSEUDOGENE = "potential_processed_pseudogene"

REASON_BELOW_FLOOR = "below_floor"
REASON_PSEUDOGENE = "processed_pseudogene"
REASON_BELOW_BEST = "below_best"
REASON_BELOW_THRESHOLDS = "below_thresholds"


# =============================================================================
# Decisions and Results
# =============================================================================


@attrs.define(frozen=True, slots=True)
class FilterDecision:
    """Outcome of the filter for one candidate.

    Attributes:
        candidate: The candidate evaluated.
        rank: 1-based rank within its group, or None if dropped by the floor.
        label: best_match, potential_processed_pseudogene or the rank.
        accepted: Whether the candidate was accepted.
        reason: Rejection reason, None when accepted.
    """

    candidate: Candidate
    rank: int | None
    label: str
    accepted: bool
    reason: str | None = None

    @property
    def source_id(self) -> str:
        """Evidence accession of the candidate."""
        return self.candidate.source_id


@attrs.define
class FilterResult:
    """Result of a filtering operation.

    Attributes:
        decisions: Decisions in group-then-rank order, followed by the
            candidates dropped by the floor in input order.
        config: The configuration used.
        statistics: Counts of the filtering.
    """

    decisions: list[FilterDecision]
    config: FilterConfig
    statistics: dict[str, Any] = attrs.Factory(dict)

    @property
    def accepted(self) -> list[Candidate]:
        """Accepted candidates in group-then-rank order."""
        return [d.candidate for d in self.decisions if d.accepted]

    @property
    def rejected(self) -> list[Candidate]:
        """Rejected candidates."""
        return [d.candidate for d in self.decisions if not d.accepted]

    @property
    def total_count(self) -> int:
        """Total number of candidates processed."""
        return len(self.decisions)

    @property
    def accept_count(self) -> int:
        """Number of candidates accepted."""
        return sum(1 for d in self.decisions if d.accepted)

    @property
    def reject_count(self) -> int:
        """Number of candidates rejected."""
        return self.total_count - self.accept_count


@attrs.define
class _GroupState:
    """Running state of the acceptance pass over one ranked group."""

    rank: int = 0
    max_score: float | None = None
    best_is_spliced: bool = False


# =============================================================================
# Evidence Filter
# =============================================================================


def ranking_key(candidate: Candidate) -> tuple[float, int, float]:
    """Sort key ranking candidates best-first.

    Coverage, then exon count, then percent identity, all descending.
    """
    return (-candidate.coverage, -candidate.exon_count, -candidate.percent_identity)


def passes_floor(candidate: Candidate) -> bool:
    """Check the fixed coverage and identity floor applied before grouping."""
    return (
        candidate.coverage >= PREFILTER_MIN_COVERAGE
        and candidate.percent_identity >= PREFILTER_MIN_PERCENT
    )


@attrs.define
class EvidenceFilter:
    """Select the best candidate alignments of each evidence sequence.

    Example:
        >>> evidence_filter = EvidenceFilter(FilterConfig(min_coverage=90))
        >>> accepted = evidence_filter.filter(candidates)
    """

    config: FilterConfig = attrs.Factory(FilterConfig)

    def filter(self, candidates: Iterable[Candidate]) -> list[Candidate]:
        """Return the accepted candidates.

        Args:
            candidates: Candidates in any order.

        Returns:
            Accepted candidates, grouped by evidence sequence and ranked
            best-first within each group.

        Raises:
            MalformedCandidateError: If a candidate has no exons or its first
                exon carries no evidence.
        """
        return self.apply(candidates).accepted

    def apply(self, candidates: Iterable[Candidate]) -> FilterResult:
        """Evaluate every candidate and keep all decisions.

        Args:
            candidates: Candidates in any order.

        Returns:
            FilterResult with decisions and statistics.

        Raises:
            MalformedCandidateError: If a candidate has no exons or its first
                exon carries no evidence.
        """
        candidates = list(candidates)
        for candidate in candidates:
            candidate.validate()

        groups: dict[str, list[Candidate]] = {}
        below_floor: list[FilterDecision] = []
        for candidate in candidates:
            if not passes_floor(candidate):
                below_floor.append(
                    FilterDecision(
                        candidate=candidate,
                        rank=None,
                        label="",
                        accepted=False,
                        reason=REASON_BELOW_FLOOR,
                    )
                )
                continue
            groups.setdefault(candidate.source_id, []).append(candidate)

        decisions: list[FilterDecision] = []
        for source_id, group in groups.items():
            decisions.extend(self._evaluate_group(source_id, group))
        decisions.extend(below_floor)

        fail_reasons: dict[str, int] = {}
        for decision in decisions:
            if decision.reason:
                fail_reasons[decision.reason] = fail_reasons.get(decision.reason, 0) + 1

        accepted = sum(1 for d in decisions if d.accepted)
        statistics = {
            "total": len(decisions),
            "below_floor": len(below_floor),
            "groups": len(groups),
            "accepted": accepted,
            "rejected": len(decisions) - accepted,
            "fail_reasons": fail_reasons,
        }

        logger.info(
            f"Accepted {accepted}/{len(decisions)} candidates "
            f"from {len(groups)} evidence sequences ({self.config.policy})"
        )
        return FilterResult(decisions=decisions, config=self.config, statistics=statistics)

    def _evaluate_group(
        self,
        source_id: str,
        group: list[Candidate],
    ) -> list[FilterDecision]:
        """Run the acceptance pass over one group, best-ranked first."""
        state = _GroupState()
        decisions = []

        for candidate in sorted(group, key=ranking_key):
            state.rank += 1
            spliced = candidate.is_spliced
            if state.rank == 1:
                state.max_score = candidate.coverage
                state.best_is_spliced = spliced

            possible_pseudogene = state.rank > 1 and state.best_is_spliced and not spliced
            if state.rank == 1:
                label = LABEL_BEST
            elif possible_pseudogene:
                label = LABEL_PSEUDOGENE
            else:
                label = str(state.rank)

            reason = self._rejection_reason(candidate, state.max_score, possible_pseudogene)
            decision = FilterDecision(
                candidate=candidate,
                rank=state.rank,
                label=label,
                accepted=reason is None,
                reason=reason,
            )
            decisions.append(decision)

            trace_logger.debug(
                f"match:{source_id} coverage:{candidate.coverage} "
                f"perc_id:{candidate.percent_identity} extent:{candidate.extent} "
                f"strand:{candidate.strand} comment:{label} "
                f"accept:{'YES' if decision.accepted else 'NO'}"
            )

        return decisions

    def _rejection_reason(
        self,
        candidate: Candidate,
        max_score: float,
        possible_pseudogene: bool,
    ) -> str | None:
        """Decide whether a ranked candidate is rejected.

        Args:
            candidate: The candidate.
            max_score: Coverage of the group's best candidate.
            possible_pseudogene: Unspliced below a spliced best candidate.

        Returns:
            Rejection reason, or None if the candidate is accepted.
        """
        config = self.config
        if config.reject_processed_pseudos and possible_pseudogene:
            return REASON_PSEUDOGENE

        score = candidate.coverage
        if config.best_in_genome:
            near_best = score == max_score
        else:
            near_best = score >= NEAR_BEST_FRACTION * max_score
        if not near_best:
            return REASON_BELOW_BEST

        min_coverage = config.coverage_threshold
        min_percent = config.min_percent
        perc_id = candidate.percent_identity
        if (score >= min_coverage and perc_id >= min_percent) or (
            score >= RELAXED_COVERAGE_FACTOR * min_coverage
            and perc_id >= RELAXED_PERCENT_FACTOR * min_percent
        ):
            return None
        return REASON_BELOW_THRESHOLDS


# =============================================================================
# Summary Functions
# =============================================================================


def summarize_filter_result(result: FilterResult) -> str:
    """Generate summary text for a filter result.

    Args:
        result: The FilterResult to summarize.

    Returns:
        Multi-line summary string.
    """
    config = result.config
    lines = [
        f"Policy: {config.policy}",
        f"Min coverage: {config.coverage_threshold:g}",
        f"Min percent identity: {config.min_percent:g}",
        f"Reject processed pseudogenes: {'yes' if config.reject_processed_pseudos else 'no'}",
        "",
        f"Total candidates: {result.total_count}",
        f"Evidence sequences: {result.statistics.get('groups', 0)}",
        f"Accepted: {result.accept_count}",
        f"Rejected: {result.reject_count}",
    ]

    if result.statistics.get("fail_reasons"):
        lines.append("")
        lines.append("Rejection reasons:")
        for reason, count in sorted(
            result.statistics["fail_reasons"].items(),
            key=lambda x: -x[1],
        ):
            lines.append(f"  {reason}: {count}")

    return "\n".join(lines)
