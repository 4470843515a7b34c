"""Classification commands: predictor consensus, finalization, or both.

Commands for:
- predict: tally in-silico predictors and append consensus fields
- finalize: run the priority cascade and append final verdict fields
- run: both stages in a single pass over the input
"""

import logging
import sys
from pathlib import Path

import click

from pathogenicity_pipeline.config.loader import load_config_with_overrides
from pathogenicity_pipeline.output import build_verdict_table, summarize_verdicts, write_verdict_summary
from pathogenicity_pipeline.persistence import PipelineStore, ProvenanceTracker
from pathogenicity_pipeline.persistence.duckdb_store import VERDICTS_TABLE
from pathogenicity_pipeline.processing import Stage, process_vcf
from pathogenicity_pipeline.vcf.models import MalformedRecordError

logger = logging.getLogger(__name__)

# Failures listed individually before the CLI switches to a count
MAX_LISTED_FAILURES = 10


def _classify(ctx, stages, input_path, output_path, workers, summary_dir, title):
    config_path = ctx.obj['config_path']

    click.echo(click.style(f"=== {title} ===", bold=True))
    click.echo()

    store = None
    try:
        # Step 1: Load configuration
        click.echo(click.style("Step 1: Loading configuration...", bold=True))
        config = load_config_with_overrides(config_path, {"workers": workers})
        provenance = ProvenanceTracker.from_config(config)
        click.echo(click.style(f"  Config loaded: {config_path}", fg='green'))
        click.echo()

        # Step 2: Classify records
        click.echo(click.style("Step 2: Classifying records...", bold=True))
        click.echo(f"  Input:   {input_path}")
        click.echo(f"  Output:  {output_path}")
        click.echo(f"  Stages:  {', '.join(s.value for s in stages)}")
        click.echo(f"  Workers: {config.workers}")

        try:
            summary = process_vcf(input_path, output_path, config, stages=stages)
        except MalformedRecordError as e:
            click.echo(click.style(f"  Error reading VCF: {e}", fg='red'), err=True)
            sys.exit(1)

        click.echo(click.style(
            f"  Classified {summary.records_written} of {summary.records_read} records",
            fg='green'
        ))
        click.echo()
        provenance.record_step('classify_records', {
            'input': str(input_path),
            'output': str(output_path),
            'stages': [s.value for s in stages],
            'records_read': summary.records_read,
            'records_written': summary.records_written,
            'failures': len(summary.failures),
        })

        # Step 3: Verdict summary (finalization only)
        if Stage.FINALIZE in stages:
            click.echo(click.style("Step 3: Summarizing verdicts...", bold=True))
            verdict_df = build_verdict_table(summary.verdicts)
            tallies = summarize_verdicts(verdict_df)

            for label, count in tallies['by_pathogenicity'].items():
                click.echo(f"  {label}: {count}")
            click.echo(f"  ClinVar/HGMD conflicts: {tallies['conflicts']}")

            if summary_dir is not None:
                output_paths = write_verdict_summary(verdict_df, summary_dir)
                click.echo(click.style(f"  TSV:        {output_paths['tsv']}", fg='green'))
                click.echo(click.style(f"  Parquet:    {output_paths['parquet']}", fg='green'))
                click.echo(click.style(f"  Provenance: {output_paths['provenance']}", fg='green'))

            if config.duckdb_path is not None:
                store = PipelineStore.from_config(config)
                store.save_dataframe(
                    verdict_df,
                    VERDICTS_TABLE,
                    description=f"Final verdicts for {Path(input_path).name}",
                )
                click.echo(click.style(
                    f"  Saved {verdict_df.height} verdicts to {config.duckdb_path}",
                    fg='green'
                ))

            click.echo()
            provenance.record_step('summarize_verdicts', tallies)

        # Save provenance sidecar
        provenance_path = provenance.save_sidecar(output_path)
        click.echo(f"Provenance: {provenance_path}")
        click.echo()

        if not summary.ok:
            click.echo(click.style(
                f"{len(summary.failures)} malformed record(s) were left out of the output:",
                fg='red'
            ), err=True)
            for failure in summary.failures[:MAX_LISTED_FAILURES]:
                click.echo(f"  line {failure.line_number}: {failure.message}", err=True)
            if len(summary.failures) > MAX_LISTED_FAILURES:
                click.echo(f"  ... and {len(summary.failures) - MAX_LISTED_FAILURES} more", err=True)
            sys.exit(1)

        click.echo(click.style(f"{title} complete!", fg='green', bold=True))

    except Exception as e:
        click.echo(click.style(f"{title} failed: {e}", fg='red'), err=True)
        logger.exception("Classification command failed")
        sys.exit(1)
    finally:
        if store is not None:
            store.close()


_input_argument = click.argument('input_path', type=click.Path(exists=True, dir_okay=False, path_type=Path))
_output_argument = click.argument('output_path', type=click.Path(dir_okay=False, path_type=Path))
_workers_option = click.option(
    '--workers',
    type=click.IntRange(min=1),
    default=None,
    help='Worker processes for record classification (default: config workers)'
)
_summary_dir_option = click.option(
    '--summary-dir',
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help='Write the per-variant verdict table (TSV + Parquet) to this directory'
)


@click.command('predict')
@_input_argument
@_output_argument
@_workers_option
@click.pass_context
def predict(ctx, input_path, output_path, workers):
    """Tally in-silico predictors and append consensus fields.

    Appends NUM_PATH_PREDS, TOTAL_NUM_PREDS and FINAL_PRED (plus GERP_PRED /
    PHYLOP20WAY_MAMMALIAN_PRED conservation calls) to each record.

    Examples:

        pathogenicity-pipeline predict annotated.vcf.gz predicted.vcf.gz
    """
    _classify(ctx, (Stage.PREDICT,), input_path, output_path, workers, None,
              "Predictor Consensus")


@click.command('finalize')
@_input_argument
@_output_argument
@_workers_option
@_summary_dir_option
@click.pass_context
def finalize(ctx, input_path, output_path, workers, summary_dir):
    """Run the evidence cascade and append final verdict fields.

    Reads consensus fields written by 'predict' when present. Variants
    without predictor counts fall through to the no-evidence verdict.

    Examples:

        pathogenicity-pipeline finalize predicted.vcf.gz final.vcf.gz

        pathogenicity-pipeline finalize predicted.vcf.gz final.vcf.gz --summary-dir results
    """
    _classify(ctx, (Stage.FINALIZE,), input_path, output_path, workers, summary_dir,
              "Pathogenicity Finalization")


@click.command('run')
@_input_argument
@_output_argument
@_workers_option
@_summary_dir_option
@click.pass_context
def run(ctx, input_path, output_path, workers, summary_dir):
    """Run predictor consensus and finalization in one pass.

    Examples:

        pathogenicity-pipeline run annotated.vcf.gz final.vcf.gz --workers 4
    """
    _classify(ctx, (Stage.PREDICT, Stage.FINALIZE), input_path, output_path, workers, summary_dir,
              "Pathogenicity Classification")
