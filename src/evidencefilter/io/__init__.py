"""Input/output handlers for evidencefilter.

- GFF3: candidate alignments in, accepted candidates out
- TSV: per-candidate decision report

Example:
    >>> from evidencefilter.io import read_candidates, write_candidates
    >>> candidates = read_candidates("exonerate.gff3")
"""

from evidencefilter.io.gff import (
    CandidateGFFReader,
    CandidateGFFWriter,
    read_candidates,
    write_candidates,
)
from evidencefilter.io.report import write_decision_report_tsv

__all__: list[str] = [
    "CandidateGFFReader",
    "CandidateGFFWriter",
    "read_candidates",
    "write_candidates",
    "write_decision_report_tsv",
]
