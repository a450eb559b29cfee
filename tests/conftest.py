"""Pytest configuration and shared fixtures for evidencefilter tests.

Fixtures are organized by category:

- Candidate fixtures: Build candidates programmatically
- GFF3 fixtures: Write small aligner outputs to disk
"""

from pathlib import Path
from typing import Callable

import pytest

from evidencefilter.core.candidates import Candidate, Evidence, Exon


# =============================================================================
# Candidate Fixtures
# =============================================================================


def build_candidate(
    spans: list[tuple[int, int]],
    coverage: float,
    percent_identity: float,
    source_id: str = "BC000001",
    transcript_id: str | None = None,
    seqid: str = "chr1",
    strand: str = "+",
) -> Candidate:
    """Build a candidate whose first exon carries the evidence."""
    evidence = Evidence(
        score=coverage,
        percent_identity=percent_identity,
        source_id=source_id,
    )
    exons = [
        Exon(seqid, start, end, strand, evidence=(evidence,) if i == 0 else ())
        for i, (start, end) in enumerate(spans)
    ]
    return Candidate(exons=exons, transcript_id=transcript_id)


@pytest.fixture
def make_candidate() -> Callable[..., Candidate]:
    """Return a factory for candidates."""
    return build_candidate


@pytest.fixture
def spliced_spans() -> list[tuple[int, int]]:
    """Two exons separated by a 99 bp intron."""
    return [(100, 200), (300, 400)]


@pytest.fixture
def unspliced_spans() -> list[tuple[int, int]]:
    """A single exon."""
    return [(5100, 5300)]


@pytest.fixture
def mixed_candidates() -> list[Candidate]:
    """Candidates from three evidence sequences, in no particular order.

    - BC1: spliced best at 95, spliced 94, unspliced 95 (processed pseudogene)
    - BC2: single-exon alignments at 88 and 70
    - BC3: below the 40/40 floor
    """
    return [
        build_candidate([(5000, 5400)], 95.0, 96.0, "BC1", "bc1_pseudo", seqid="chr3"),
        build_candidate([(100, 200), (300, 400)], 95.0, 97.0, "BC1", "bc1_best"),
        build_candidate([(200, 500)], 88.0, 92.0, "BC2", "bc2_best", seqid="chr2"),
        build_candidate([(700, 800), (900, 1000)], 94.0, 99.0, "BC1", "bc1_second"),
        build_candidate([(100, 150)], 35.0, 99.0, "BC3", "bc3_low"),
        build_candidate([(800, 900)], 70.0, 95.0, "BC2", "bc2_low", seqid="chr4"),
    ]


# =============================================================================
# GFF3 Fixtures
# =============================================================================


@pytest.fixture
def candidates_gff3(tmp_path: Path) -> Path:
    """Create a small aligner GFF3 for testing.

    EST1 aligns twice (spliced and as an unspliced copy on chr2), EST2 once.
    """
    gff_path = tmp_path / "candidates.gff3"

    content = """\
##gff-version 3
chr1\texonerate\tcDNA_match\t101\t500\t.\t+\t.\tID=aln1;Target=EST1 1 300 +;coverage=96.5;identity=98.2
chr1\texonerate\tmatch_part\t301\t500\t.\t+\t.\tID=aln1.2;Parent=aln1
chr1\texonerate\tmatch_part\t101\t200\t.\t+\t.\tID=aln1.1;Parent=aln1
chr2\texonerate\tcDNA_match\t1001\t1300\t.\t-\t.\tID=aln2;Target=EST1 1 300 +;coverage=95;identity=97
chr2\texonerate\tmatch_part\t1001\t1300\t.\t-\t.\tID=aln2.1;Parent=aln2
chr3\texonerate\tmRNA\t51\t400\t88\t+\t.\tID=aln3;Target=EST2 1 200 +;identity=93.5
chr3\texonerate\texon\t51\t150\t.\t+\t.\tID=aln3.1;Parent=aln3
chr3\texonerate\texon\t301\t400\t.\t+\t.\tID=aln3.2;Parent=aln3
"""
    gff_path.write_text(content)
    return gff_path


@pytest.fixture
def incomplete_gff3(tmp_path: Path) -> Path:
    """GFF3 with a transcript lacking identity, one lacking exons, and a bad line."""
    gff_path = tmp_path / "incomplete.gff3"

    content = """\
##gff-version 3
chr1\texonerate\tcDNA_match\t101\t500\t.\t+\t.\tID=no_identity;Target=EST1 1 300 +;coverage=96.5
chr1\texonerate\tmatch_part\t101\t500\t.\t+\t.\tParent=no_identity
chr1\texonerate\tcDNA_match\t601\t900\t.\t+\t.\tID=no_exons;Target=EST2;coverage=90;identity=95
chr1\texonerate\tcDNA_match\t1001\t1200
chr1\texonerate\tcDNA_match\t2001\t2200\t.\t+\t.\tID=good;Target=EST3;coverage=90;identity=95
chr1\texonerate\tmatch_part\t2001\t2200\t.\t+\t.\tParent=good
"""
    gff_path.write_text(content)
    return gff_path
