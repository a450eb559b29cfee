"""TSV report of filter decisions.

Example:
    >>> from evidencefilter.io.report import write_decision_report_tsv
    >>> result = EvidenceFilter(config).apply(candidates)
    >>> write_decision_report_tsv(result, "decisions.tsv")
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from evidencefilter.io.gff import format_number

if TYPE_CHECKING:
    from evidencefilter.core.filter import FilterResult

logger = logging.getLogger(__name__)

REPORT_HEADERS = [
    "source_id",
    "transcript_id",
    "rank",
    "seqid",
    "start",
    "end",
    "strand",
    "exon_count",
    "coverage",
    "percent_identity",
    "spliced",
    "label",
    "accepted",
    "reason",
]


def write_decision_report_tsv(
    result: "FilterResult",
    output_path: Path | str,
) -> None:
    """Write one row per filter decision to TSV.

    Args:
        result: FilterResult from EvidenceFilter.apply.
        output_path: Output file path.
    """
    output_path = Path(output_path)

    with open(output_path, "w", newline="") as f:
        writer = csv.writer(f, delimiter="\t")
        writer.writerow(REPORT_HEADERS)

        for decision in result.decisions:
            candidate = decision.candidate
            writer.writerow([
                candidate.source_id,
                candidate.transcript_id or ".",
                decision.rank if decision.rank is not None else ".",
                candidate.seqid,
                candidate.start,
                candidate.end,
                candidate.strand,
                candidate.exon_count,
                format_number(candidate.coverage),
                format_number(candidate.percent_identity),
                "yes" if candidate.is_spliced else "no",
                decision.label or ".",
                "yes" if decision.accepted else "no",
                decision.reason or ".",
            ])

    logger.info(f"Wrote {len(result.decisions)} decisions to {output_path}")
