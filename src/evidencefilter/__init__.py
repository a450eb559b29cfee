"""evidencefilter: select the best transcript alignments of each evidence sequence.

Candidate gene models produced by aligning cDNAs or ESTs to a genome are
grouped by the sequence they came from, ranked by alignment quality and
filtered so that only the best placements (and no likely processed
pseudogenes) are kept.

Example:
    >>> import evidencefilter
    >>> evidencefilter.__version__
    '0.1.0'

Modules:
    config: Filter thresholds, policies and presets
    core: Candidate records and the evidence filter
    io: GFF3 and TSV input/output
    utils: Logging utilities
"""

__version__ = "0.1.0"

from evidencefilter.config import FilterConfig
from evidencefilter.core.candidates import (
    Candidate,
    Evidence,
    Exon,
    MalformedCandidateError,
)
from evidencefilter.core.filter import EvidenceFilter, FilterDecision, FilterResult

__all__ = [
    "__version__",
    "Candidate",
    "Evidence",
    "EvidenceFilter",
    "Exon",
    "FilterConfig",
    "FilterDecision",
    "FilterResult",
    "MalformedCandidateError",
]
