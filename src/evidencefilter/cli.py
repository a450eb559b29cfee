"""Command-line interface for evidencefilter.

Commands:
    filter: Select the best candidate alignments of each evidence sequence

Example:
    $ evidencefilter --help
    $ evidencefilter filter -i exonerate.gff3 -o accepted.gff3 --preset best_in_genome
    $ evidencefilter filter -i exonerate.gff3 -o accepted.gff3 --min-coverage 90 --min-percent 97 -r decisions.tsv
"""

import logging
from pathlib import Path
from typing import Optional

import attrs
import click
from rich.console import Console

from evidencefilter import __version__
from evidencefilter.config import PRESETS, FilterConfig
from evidencefilter.utils.logging import log_duration, setup_logging

console = Console()
logger = logging.getLogger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="evidencefilter")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output.")
@click.option("-q", "--quiet", is_flag=True, help="Suppress non-error output.")
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    help="Write a debug log, including every filter decision, to this file.",
)
@click.option(
    "--trace-file",
    type=click.Path(path_type=Path),
    help="Write only the per-candidate decision trace (match: lines) to this file.",
)
@click.pass_context
def main(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    log_file: Optional[Path],
    trace_file: Optional[Path],
) -> None:
    """evidencefilter: select the best transcript alignments of each evidence sequence.

    Candidate alignments are grouped by the cDNA/EST they were aligned from,
    ranked by coverage, exon count and identity, and accepted when they are
    at or near the best coverage of their group.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet

    verbosity = 0 if quiet else (2 if verbose else 1)
    setup_logging(verbosity=verbosity, log_file=log_file, trace_file=trace_file)


# =============================================================================
# filter command
# =============================================================================


@main.command("filter")
@click.option(
    "-i",
    "--input",
    "input_gff",
    type=click.Path(exists=True, path_type=Path),
    required=True,
    help="Candidate alignments GFF3 (transcripts with Target, coverage, identity).",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(path_type=Path),
    required=True,
    help="Output GFF3 of accepted candidates.",
)
@click.option(
    "-r",
    "--report",
    type=click.Path(path_type=Path),
    help="Output TSV with one row per filter decision.",
)
@click.option(
    "--preset",
    type=click.Choice(list(PRESETS)),
    help="Start from a preset profile; explicit options override it.",
)
@click.option("--min-coverage", type=float, help="Minimum coverage of the evidence sequence.")
@click.option("--min-score", type=float, help="Alias of --min-coverage.")
@click.option("--min-percent", type=float, help="Minimum percent identity.")
@click.option(
    "--best-in-genome/--near-best",
    default=None,
    help="Keep only ties with the best coverage, or anything within 2% of it.",
)
@click.option(
    "--reject-processed-pseudos/--keep-processed-pseudos",
    default=None,
    help="Reject unspliced alignments ranked below a spliced best alignment.",
)
@click.pass_context
def filter_command(
    ctx: click.Context,
    input_gff: Path,
    output: Path,
    report: Optional[Path],
    preset: Optional[str],
    min_coverage: Optional[float],
    min_score: Optional[float],
    min_percent: Optional[float],
    best_in_genome: Optional[bool],
    reject_processed_pseudos: Optional[bool],
) -> None:
    """Filter candidate alignments by evidence.

    \b
    Preset profiles:
    - best_in_genome: coverage >= 80, identity >= 90, best coverage only
    - near_best: coverage >= 80, identity >= 90, within 2% of the best

    Example:
        $ evidencefilter filter -i exonerate.gff3 -o accepted.gff3 --preset near_best
    """
    from evidencefilter.core.filter import EvidenceFilter, summarize_filter_result
    from evidencefilter.io.gff import CandidateGFFReader, write_candidates
    from evidencefilter.io.report import write_decision_report_tsv

    verbose = ctx.obj.get("verbose", False)
    quiet = ctx.obj.get("quiet", False)

    try:
        config = FilterConfig.preset(preset) if preset else FilterConfig()
        overrides = {
            "min_coverage": min_coverage,
            "min_score": min_score,
            "min_percent": min_percent,
            "best_in_genome": best_in_genome,
            "reject_processed_pseudos": reject_processed_pseudos,
        }
        overrides = {k: v for k, v in overrides.items() if v is not None}
        if min_score is not None and min_coverage is None:
            # min_coverage would shadow the requested min_score
            overrides["min_coverage"] = None
        config = attrs.evolve(config, **overrides)

        if not quiet:
            console.print(f"[blue]Loading candidates from:[/blue] {input_gff}")

        reader = CandidateGFFReader(input_gff)
        candidates = list(reader.iter_candidates())

        if not quiet:
            console.print(f"[green]Loaded {len(candidates)} candidates[/green]")
            if reader.skipped:
                console.print(
                    f"[yellow]Warning:[/yellow] skipped {len(reader.skipped)} "
                    "incomplete transcripts"
                )

        with log_duration("Filtering", logger):
            result = EvidenceFilter(config).apply(candidates)

        write_candidates(result.accepted, output, version=__version__)
        if report:
            write_decision_report_tsv(result, report)

        if not quiet:
            console.print("\n[bold]Filter Results:[/bold]")
            console.print(summarize_filter_result(result))
            console.print(f"\n[green]Wrote {result.accept_count} candidates to:[/green] {output}")
            if report:
                console.print(f"[green]Wrote decision report to:[/green] {report}")

    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        if verbose:
            import traceback
            traceback.print_exc()
        raise SystemExit(1)


if __name__ == "__main__":
    main()
