"""Report command: verdict counts from the DuckDB store.

Reads the classified_variants table written by 'finalize' or 'run' and
prints counts by pathogenicity, source and cascade branch, optionally
exporting the stored table to TSV + Parquet.
"""

import logging
import sys
from pathlib import Path

import click

from pathogenicity_pipeline.config.loader import load_config
from pathogenicity_pipeline.output import summarize_verdicts, write_verdict_summary
from pathogenicity_pipeline.persistence import PipelineStore
from pathogenicity_pipeline.persistence.duckdb_store import VERDICTS_TABLE

logger = logging.getLogger(__name__)


@click.command('report')
@click.option(
    '--output-dir',
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help='Export the stored verdict table to this directory (TSV + Parquet)'
)
@click.pass_context
def report(ctx, output_dir):
    """Print verdict counts from the last stored classification run.

    Requires duckdb_path in the configuration and a prior 'finalize' or
    'run' with that configuration.

    Examples:

        pathogenicity-pipeline report

        pathogenicity-pipeline report --output-dir results
    """
    config_path = ctx.obj['config_path']

    click.echo(click.style("=== Verdict Report ===", bold=True))
    click.echo()

    store = None
    try:
        config = load_config(config_path)
        if config.duckdb_path is None:
            click.echo(click.style(
                "Error: duckdb_path is not set in the configuration.",
                fg='red'
            ), err=True)
            sys.exit(1)

        store = PipelineStore.from_config(config)

        if not store.has_checkpoint(VERDICTS_TABLE):
            click.echo(click.style(
                f"Error: {VERDICTS_TABLE} table not found. Run 'pathogenicity-pipeline finalize' first.",
                fg='red'
            ), err=True)
            sys.exit(1)

        checkpoint = next(
            c for c in store.list_checkpoints() if c['table_name'] == VERDICTS_TABLE
        )
        click.echo(f"Stored run: {checkpoint['description']} ({checkpoint['created_at']})")
        click.echo()

        verdict_df = store.load_dataframe(VERDICTS_TABLE)
        summary = summarize_verdicts(verdict_df)

        click.echo(f"Total variants: {summary['total_variants']}")
        click.echo(f"ClinVar/HGMD conflicts: {summary['conflicts']}")
        click.echo()

        for heading, key in (
            ("By Pathogenicity:", "by_pathogenicity"),
            ("By Source:", "by_source"),
            ("By Branch:", "by_branch"),
        ):
            click.echo(click.style(heading, bold=True))
            for value, count in summary[key].items():
                click.echo(f"  {value}: {count}")
            click.echo()

        if output_dir is not None:
            output_paths = write_verdict_summary(verdict_df, output_dir)
            click.echo(click.style(f"TSV:        {output_paths['tsv']}", fg='green'))
            click.echo(click.style(f"Parquet:    {output_paths['parquet']}", fg='green'))
            click.echo(click.style(f"Provenance: {output_paths['provenance']}", fg='green'))

    except Exception as e:
        click.echo(click.style(f"Report command failed: {e}", fg='red'), err=True)
        logger.exception("Report command failed")
        sys.exit(1)
    finally:
        if store is not None:
            store.close()
