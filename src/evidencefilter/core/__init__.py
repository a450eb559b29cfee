"""Core filtering logic for evidencefilter.

- Candidate, Exon and Evidence records
- Splice detection
- The evidence filter and its decisions

Example:
    >>> from evidencefilter.core import EvidenceFilter, Candidate
"""

from evidencefilter.core.candidates import (
    Candidate,
    Evidence,
    Exon,
    MalformedCandidateError,
    is_spliced,
)
from evidencefilter.core.filter import (
    EvidenceFilter,
    FilterDecision,
    FilterResult,
    summarize_filter_result,
)

__all__: list[str] = [
    # Candidates
    "Candidate",
    "Evidence",
    "Exon",
    "MalformedCandidateError",
    "is_spliced",
    # Filtering
    "EvidenceFilter",
    "FilterDecision",
    "FilterResult",
    "summarize_filter_result",
]
