"""Candidate transcript alignments and their supporting evidence.

This module defines the typed records the evidence filter works on. A
candidate is an alignment-derived transcript model: an ordered run of exons
whose first exon carries the supporting evidence (coverage, percent identity
and the accession of the aligned sequence).

Coordinates are 1-based and inclusive, as produced by the aligner, so the
intron between two exons spans ``next.start - current.end - 1`` bases.

Example:
    >>> from evidencefilter.core.candidates import Candidate, Evidence, Exon
    >>> evidence = Evidence(score=95.0, percent_identity=98.5, source_id="BC012345.1")
    >>> candidate = Candidate(
    ...     exons=(
    ...         Exon("chr1", 100, 200, "+", evidence=(evidence,)),
    ...         Exon("chr1", 350, 420, "+"),
    ...     ),
    ... )
    >>> candidate.coverage, candidate.exon_count, candidate.is_spliced
    (95.0, 2, True)
"""

from __future__ import annotations

import re

import attrs

# =============================================================================
# Constants
# =============================================================================

# Gaps up to this length are frameshifts or alignment artifacts, not introns
MAX_FRAMESHIFT_INTRON = 9

# Trailing slice suffix on sequence names, e.g. "chr1.1000-2000"
_SLICE_SUFFIX = re.compile(r"\.\d+-\d+$")


# =============================================================================
# Exceptions
# =============================================================================


class MalformedCandidateError(ValueError):
    """Raised when a candidate has no exons or its first exon lacks evidence."""


# =============================================================================
# Data Models
# =============================================================================


@attrs.define(frozen=True, slots=True)
class Evidence:
    """Supporting evidence for an aligned exon.

    Attributes:
        score: Coverage of the evidence sequence by the alignment (0-100).
        percent_identity: Percent identity of the alignment (0-100).
        source_id: Accession of the originating evidence sequence.
        target: Full GFF3 Target value (accession, start, end, strand), if known.
    """

    score: float
    percent_identity: float
    source_id: str
    target: str | None = None


@attrs.define(frozen=True, slots=True)
class Exon:
    """A genomic interval of a candidate, 1-based inclusive.

    Attributes:
        seqid: Scaffold/chromosome name.
        start: Start position (1-based, inclusive).
        end: End position (1-based, inclusive).
        strand: Strand (+ or -).
        evidence: Supporting evidence records aligned to this exon.
    """

    seqid: str
    start: int
    end: int
    strand: str = "+"
    evidence: tuple[Evidence, ...] = attrs.field(default=(), converter=tuple)

    @property
    def length(self) -> int:
        """Exon length in base pairs."""
        return self.end - self.start + 1


@attrs.define(frozen=True, slots=True)
class Candidate:
    """A candidate transcript produced by an aligner.

    The candidate's metrics are those of the first evidence record on the
    first exon. Accessing them on a candidate without exons, or whose first
    exon has no evidence, raises MalformedCandidateError.

    Attributes:
        exons: Exons in the order supplied by the aligner.
        transcript_id: Optional identifier used in reports.
    """

    exons: tuple[Exon, ...] = attrs.field(converter=tuple)
    transcript_id: str | None = None

    @property
    def evidence(self) -> Evidence:
        """Representative evidence record of the candidate."""
        if not self.exons:
            raise MalformedCandidateError(
                f"Candidate {self.transcript_id or '<unnamed>'} has no exons"
            )
        first = self.exons[0]
        if not first.evidence:
            raise MalformedCandidateError(
                f"Candidate {self.transcript_id or '<unnamed>'} has no evidence "
                f"on its first exon ({first.seqid}:{first.start}-{first.end})"
            )
        return first.evidence[0]

    @property
    def coverage(self) -> float:
        """Coverage of the evidence sequence."""
        return self.evidence.score

    @property
    def percent_identity(self) -> float:
        """Percent identity of the alignment."""
        return self.evidence.percent_identity

    @property
    def source_id(self) -> str:
        """Accession of the evidence sequence."""
        return self.evidence.source_id

    @property
    def exon_count(self) -> int:
        """Number of exons."""
        return len(self.exons)

    @property
    def sorted_exons(self) -> list[Exon]:
        """Exons sorted by genomic start."""
        return sorted(self.exons, key=lambda e: e.start)

    @property
    def is_spliced(self) -> bool:
        """Whether the exon structure contains a real intron."""
        return is_spliced(self.exons)

    @property
    def seqid(self) -> str:
        """Scaffold of the first exon."""
        return self.sorted_exons[0].seqid

    @property
    def strand(self) -> str:
        """Strand of the first exon."""
        return self.sorted_exons[0].strand

    @property
    def start(self) -> int:
        """Leftmost exon start."""
        return self.sorted_exons[0].start

    @property
    def end(self) -> int:
        """Rightmost exon end."""
        return self.sorted_exons[-1].end

    @property
    def extent(self) -> str:
        """Genomic span as ``seqid.start-end`` with any slice suffix removed."""
        seqid = _SLICE_SUFFIX.sub("", self.seqid)
        return f"{seqid}.{self.start}-{self.end}"

    def validate(self) -> None:
        """Check the candidate exposes representative evidence.

        Raises:
            MalformedCandidateError: If the candidate has no exons or its
                first exon carries no evidence.
        """
        self.evidence


# =============================================================================
# Splice Detection
# =============================================================================


def intron_lengths(exons: tuple[Exon, ...] | list[Exon]) -> list[int]:
    """Gap lengths between consecutive exons, ordered by start.

    Args:
        exons: Exons in any order.

    Returns:
        List of gap lengths (``next.start - current.end - 1``).
    """
    ordered = sorted(exons, key=lambda e: e.start)
    return [
        ordered[i + 1].start - ordered[i].end - 1
        for i in range(len(ordered) - 1)
    ]


def is_spliced(exons: tuple[Exon, ...] | list[Exon]) -> bool:
    """Check whether a set of exons is separated by at least one real intron.

    Gaps of MAX_FRAMESHIFT_INTRON bases or fewer are treated as frameshifts
    or alignment artifacts.

    Args:
        exons: Exons in any order.

    Returns:
        True if any gap is longer than MAX_FRAMESHIFT_INTRON.
    """
    if len(exons) < 2:
        return False
    return any(gap > MAX_FRAMESHIFT_INTRON for gap in intron_lengths(exons))
