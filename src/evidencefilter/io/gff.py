"""GFF3 handling for candidate alignments.

Reads aligner output in GFF3 form into Candidate objects and writes accepted
candidates back out. Each transcript-level feature (mRNA, match, cDNA_match,
...) with its exon children is one candidate. Evidence is taken from the
transcript line: the ``Target`` attribute names the aligned sequence and the
``coverage`` and ``identity`` attributes carry the alignment metrics.

Coordinates are kept 1-based and inclusive, as in the file.

Example:
    >>> from evidencefilter.io.gff import read_candidates, write_candidates
    >>> candidates = read_candidates("exonerate.gff3")
    >>> write_candidates(accepted, "accepted.gff3")
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any, Iterator

from evidencefilter.core.candidates import Candidate, Evidence, Exon

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

# GFF3 column indices
COL_SEQID = 0
COL_SOURCE = 1
COL_TYPE = 2
COL_START = 3
COL_END = 4
COL_SCORE = 5
COL_STRAND = 6
COL_PHASE = 7
COL_ATTRIBUTES = 8

FEATURE_MRNA = "mRNA"
FEATURE_EXON = "exon"

FEATURE_TYPES_TRANSCRIPT = {
    "mRNA",
    "transcript",
    "match",
    "cDNA_match",
    "EST_match",
    "expressed_sequence_match",
}
FEATURE_TYPES_EXON = {"exon", "match_part"}

COVERAGE_KEYS = ("coverage", "cov")
IDENTITY_KEYS = ("identity", "percent_identity", "pid")


# =============================================================================
# Attribute Parsing
# =============================================================================


def parse_attributes(attr_string: str) -> dict[str, str]:
    """Parse GFF3 attribute string into dictionary.

    Args:
        attr_string: Semicolon-separated key=value pairs.

    Returns:
        Dictionary of attribute key-value pairs.
    """
    attributes = {}
    if not attr_string or attr_string == ".":
        return attributes

    for item in attr_string.split(";"):
        item = item.strip()
        if not item or "=" not in item:
            continue
        key, value = item.split("=", 1)
        value = value.replace("%3B", ";").replace("%3D", "=").replace("%26", "&")
        value = value.replace("%2C", ",")
        attributes[key] = value

    return attributes


def format_attributes(attributes: dict[str, str]) -> str:
    """Format attribute dictionary as GFF3 string.

    Args:
        attributes: Dictionary of attributes.

    Returns:
        Semicolon-separated key=value string.
    """
    if not attributes:
        return "."

    parts = []
    for key, value in attributes.items():
        value = str(value).replace(";", "%3B").replace("=", "%3D")
        value = value.replace("&", "%26").replace(",", "%2C")
        parts.append(f"{key}={value}")

    return ";".join(parts)


def format_number(value: float) -> str:
    """Format a float compactly without losing precision.

    Uses the short ``g`` form when it reads back to the same value, the
    shortest round-tripping repr otherwise.
    """
    text = f"{value:g}"
    return text if float(text) == value else repr(value)


def _first_float(attributes: dict[str, str], keys: tuple[str, ...]) -> float | None:
    for key in keys:
        if key in attributes:
            return float(attributes[key])
    return None


def evidence_from_feature(feature: dict[str, Any]) -> Evidence | None:
    """Build the evidence record described by a transcript feature.

    The source id comes from the first token of ``Target`` (or a
    ``source_id`` attribute); coverage from a ``coverage`` attribute or the
    score column; identity from an ``identity`` attribute.

    Args:
        feature: Parsed feature dictionary.

    Returns:
        Evidence, or None if any of the three values is missing.
    """
    attributes = feature["attributes"]

    source_id = None
    target = attributes.get("Target") or None
    if target:
        source_id = target.split()[0]
    elif attributes.get("source_id"):
        source_id = attributes["source_id"]

    coverage = _first_float(attributes, COVERAGE_KEYS)
    if coverage is None:
        coverage = feature["score"]
    identity = _first_float(attributes, IDENTITY_KEYS)

    if source_id is None or coverage is None or identity is None:
        return None
    return Evidence(
        score=coverage,
        percent_identity=identity,
        source_id=source_id,
        target=target,
    )


# =============================================================================
# GFF3 Reader
# =============================================================================


class CandidateGFFReader:
    """Parse aligner GFF3 output into candidates.

    Handles:
    - Parent-child relationships between transcripts and exons
    - Evidence attributes on the transcript line
    - Malformed lines and incomplete transcripts (logged and skipped)
    - Duplicate transcript IDs (logged, and every line with that ID skipped,
      since their exons cannot be told apart)

    Attributes:
        path: Path to the GFF3 file.
        skipped: Transcript IDs skipped for missing exons or evidence, or
            because the ID is used by more than one transcript line.

    Example:
        >>> reader = CandidateGFFReader("exonerate.gff3")
        >>> for candidate in reader.iter_candidates():
        ...     print(candidate.transcript_id, candidate.coverage)
    """

    def __init__(self, gff_path: Path | str) -> None:
        """Initialize the reader.

        Args:
            gff_path: Path to GFF3 file.

        Raises:
            FileNotFoundError: If file doesn't exist.
        """
        self.path = Path(gff_path)
        if not self.path.exists():
            raise FileNotFoundError(f"GFF3 file not found: {self.path}")

        self.skipped: list[str] = []
        self._candidates: list[Candidate] | None = None

    def _parse_line(self, line: str) -> dict[str, Any] | None:
        """Parse a single GFF3 line.

        Args:
            line: Raw GFF3 line.

        Returns:
            Parsed feature dictionary or None for comments/empty/malformed.
        """
        line = line.strip()
        if not line or line.startswith("#"):
            return None

        parts = line.split("\t")
        if len(parts) < 9:
            logger.warning(f"Malformed GFF3 line (expected 9 columns): {line[:50]}...")
            return None

        try:
            return {
                "seqid": parts[COL_SEQID],
                "source": parts[COL_SOURCE],
                "type": parts[COL_TYPE],
                "start": int(parts[COL_START]),
                "end": int(parts[COL_END]),
                "score": None if parts[COL_SCORE] == "." else float(parts[COL_SCORE]),
                "strand": parts[COL_STRAND] if parts[COL_STRAND] in ("+", "-") else "+",
                "attributes": parse_attributes(parts[COL_ATTRIBUTES]),
            }
        except ValueError as e:
            logger.warning(f"Error parsing GFF3 line: {e}")
            return None

    def _build_candidates(self) -> list[Candidate]:
        """Build candidates from the GFF3 file."""
        transcript_features: dict[str, dict[str, Any]] = {}
        duplicate_ids: set[str] = set()
        exon_features: dict[str, list[dict[str, Any]]] = {}

        with open(self.path) as f:
            for line in f:
                feature = self._parse_line(line)
                if feature is None:
                    continue

                ftype = feature["type"]
                attributes = feature["attributes"]

                if ftype in FEATURE_TYPES_TRANSCRIPT:
                    tx_id = attributes.get("ID", f"tx_{len(transcript_features)}")
                    if tx_id in transcript_features:
                        if tx_id not in duplicate_ids:
                            logger.warning(f"Duplicate transcript ID {tx_id}; skipping it")
                        duplicate_ids.add(tx_id)
                        continue
                    transcript_features[tx_id] = feature

                elif ftype in FEATURE_TYPES_EXON:
                    parent = attributes.get("Parent", "")
                    for parent_id in parent.split(",") if parent else []:
                        exon_features.setdefault(parent_id, []).append(feature)

        candidates = []
        for tx_id, tf in transcript_features.items():
            if tx_id in duplicate_ids:
                self.skipped.append(tx_id)
                continue
            try:
                evidence = evidence_from_feature(tf)
            except ValueError as e:
                logger.warning(f"Invalid evidence attributes on {tx_id}: {e}")
                evidence = None
            if evidence is None:
                logger.warning(f"Skipping {tx_id}: missing Target, coverage or identity")
                self.skipped.append(tx_id)
                continue

            exons = sorted(exon_features.get(tx_id, []), key=lambda e: e["start"])
            if not exons:
                logger.warning(f"Skipping {tx_id}: no exons")
                self.skipped.append(tx_id)
                continue

            candidates.append(
                Candidate(
                    exons=[
                        Exon(
                            seqid=ef["seqid"],
                            start=ef["start"],
                            end=ef["end"],
                            strand=ef["strand"],
                            evidence=(evidence,) if i == 0 else (),
                        )
                        for i, ef in enumerate(exons)
                    ],
                    transcript_id=tx_id,
                )
            )

        logger.info(
            f"Parsed {len(candidates)} candidates from {self.path.name}"
            + (f" ({len(self.skipped)} skipped)" if self.skipped else "")
        )
        return candidates

    def iter_candidates(self) -> Iterator[Candidate]:
        """Iterate over candidates in file order.

        Yields:
            Candidate objects.
        """
        if self._candidates is None:
            self._candidates = self._build_candidates()
        yield from self._candidates

    @property
    def candidate_count(self) -> int:
        """Total number of candidates."""
        return sum(1 for _ in self.iter_candidates())


# =============================================================================
# GFF3 Writer
# =============================================================================


class CandidateGFFWriter:
    """Write candidates to GFF3 format.

    Example:
        >>> with CandidateGFFWriter("accepted.gff3") as writer:
        ...     writer.write_header()
        ...     writer.write_candidates(accepted)
    """

    def __init__(
        self,
        output_path: Path | str,
        source: str = "evidencefilter",
    ) -> None:
        """Initialize the writer.

        Args:
            output_path: Output file path.
            source: Source field value for GFF3.
        """
        self.path = Path(output_path)
        self.source = source
        self._file = open(self.path, "w")
        self._header_written = False
        self._count = 0

    def __enter__(self) -> CandidateGFFWriter:
        """Context manager entry."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.close()

    def close(self) -> None:
        """Close the output file."""
        if self._file:
            self._file.close()
            self._file = None

    def write_header(self, version: str | None = None) -> None:
        """Write GFF3 header.

        Args:
            version: Version of evidencefilter recorded as processor.
        """
        self._file.write("##gff-version 3\n")
        if version:
            self._file.write(f"#!processor evidencefilter v{version}\n")
        self._header_written = True

    def write_candidate(self, candidate: Candidate) -> None:
        """Write a candidate and its exons.

        Args:
            candidate: Candidate to write.
        """
        if not self._header_written:
            self.write_header()

        self._count += 1
        tx_id = candidate.transcript_id or f"candidate_{self._count}"
        evidence = candidate.evidence

        tx_attrs = {
            "ID": tx_id,
            "Target": evidence.target or evidence.source_id,
            "coverage": format_number(evidence.score),
            "identity": format_number(evidence.percent_identity),
        }
        self._file.write(
            format_gff_line(
                candidate.seqid,
                self.source,
                FEATURE_MRNA,
                candidate.start,
                candidate.end,
                strand=candidate.strand,
                attributes=tx_attrs,
            )
            + "\n"
        )

        for i, exon in enumerate(candidate.sorted_exons, 1):
            exon_attrs = {"ID": f"{tx_id}.exon{i}", "Parent": tx_id}
            self._file.write(
                format_gff_line(
                    exon.seqid,
                    self.source,
                    FEATURE_EXON,
                    exon.start,
                    exon.end,
                    strand=exon.strand,
                    attributes=exon_attrs,
                )
                + "\n"
            )

    def write_candidates(self, candidates: Iterable[Candidate]) -> None:
        """Write multiple candidates.

        Args:
            candidates: Candidates to write.
        """
        for candidate in candidates:
            self.write_candidate(candidate)


# =============================================================================
# Convenience Functions
# =============================================================================


def read_candidates(path: Path | str) -> list[Candidate]:
    """Read candidates from a GFF3 file.

    Args:
        path: Path to the GFF3 file.

    Returns:
        List of Candidate objects.
    """
    return list(CandidateGFFReader(path).iter_candidates())


def write_candidates(
    candidates: Iterable[Candidate],
    path: Path | str,
    source: str = "evidencefilter",
    version: str | None = None,
) -> None:
    """Write candidates to a GFF3 file.

    Args:
        candidates: Candidates to write.
        path: Output file path.
        source: Source field value.
        version: Version recorded in the header.
    """
    with CandidateGFFWriter(path, source=source) as writer:
        writer.write_header(version=version)
        writer.write_candidates(candidates)


def format_gff_line(
    seqid: str,
    source: str,
    feature_type: str,
    start: int,
    end: int,
    score: float | None = None,
    strand: str = ".",
    phase: int | None = None,
    attributes: dict[str, str] | None = None,
) -> str:
    """Format a single GFF3 line.

    Args:
        seqid: Sequence identifier.
        source: Source of the annotation.
        feature_type: Type of feature.
        start: Start position (1-based).
        end: End position (1-based, inclusive).
        score: Feature score.
        strand: Strand.
        phase: CDS phase.
        attributes: Feature attributes.

    Returns:
        Formatted GFF3 line.
    """
    score_str = "." if score is None else format_number(score)
    phase_str = "." if phase is None else str(phase)
    attr_str = format_attributes(attributes or {})

    return f"{seqid}\t{source}\t{feature_type}\t{start}\t{end}\t{score_str}\t{strand}\t{phase_str}\t{attr_str}"
