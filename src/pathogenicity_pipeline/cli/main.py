"""Main CLI entry point for pathogenicity-pipeline.

Provides command group with global options and subcommands for classifying
annotated VCFs, checking assertion tags and reporting stored verdicts.
"""

import logging
from pathlib import Path

import click

from pathogenicity_pipeline import __version__
from pathogenicity_pipeline.config.loader import load_config
from pathogenicity_pipeline.cli.classify_cmd import finalize, predict, run
from pathogenicity_pipeline.cli.report_cmd import report
from pathogenicity_pipeline.cli.validate_cmd import validate
from pathogenicity_pipeline.log_config import configure_logging


@click.group()
@click.version_option(__version__, prog_name="pathogenicity-pipeline")
@click.option(
    '--config',
    type=click.Path(exists=True, path_type=Path),
    default='config/default.yaml',
    help='Path to pipeline configuration YAML file'
)
@click.option(
    '--verbose',
    is_flag=True,
    help='Enable verbose logging (DEBUG level)'
)
@click.pass_context
def cli(ctx, config, verbose):
    """Pathogenicity-pipeline: consensus pathogenicity calls for annotated VCFs.

    Tallies in-silico predictor evidence, reconciles ClinVar and HGMD
    assertions, and writes one final pathogenicity verdict per variant.
    """
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config
    ctx.obj['verbose'] = verbose

    configure_logging(logging.DEBUG if verbose else logging.INFO)
    if verbose:
        logging.debug("Verbose logging enabled")


@cli.command()
@click.pass_context
def info(ctx):
    """Display pipeline information and configuration summary."""
    config_path = ctx.obj['config_path']

    click.echo(f"Pathogenicity Pipeline v{__version__}")
    click.echo(f"Config: {config_path}")
    click.echo()

    try:
        config = load_config(config_path)

        config_hash = config.config_hash()
        click.echo(f"Config Hash: {config_hash[:16]}...")
        click.echo()

        click.echo(click.style("Clinical Labels:", bold=True))
        for name, label in config.clinical_labels.model_dump().items():
            click.echo(f"  {name}: {label}")
        click.echo()

        predictors = config.predictors
        click.echo(click.style("Predictor Consensus:", bold=True))
        click.echo(f"  INFO tags: {', '.join(predictors.info_tags)}")
        click.echo(f"  Minimum predictions: {predictors.min_predictions}")
        click.echo(f"  Pathogenic fraction: >= {predictors.pathogenic_fraction}")
        click.echo(f"  Benign fraction:     <= {predictors.benign_fraction}")
        click.echo()

        click.echo(click.style("Finalization:", bold=True))
        click.echo(f"  MAF threshold: {config.maf_threshold}")
        click.echo(f"  Benign star:   {config.enable_benign_star}")
        click.echo(f"  Workers:       {config.workers}")
        click.echo()

        click.echo(click.style("Paths:", bold=True))
        click.echo(f"  Data Directory: {config.data_dir}")
        click.echo(f"  DuckDB Path: {config.duckdb_path}")

    except Exception as e:
        click.echo(click.style(f"Error loading config: {e}", fg='red'), err=True)
        ctx.exit(1)


# Register commands
cli.add_command(predict)
cli.add_command(finalize)
cli.add_command(run)
cli.add_command(validate)
cli.add_command(report)


if __name__ == '__main__':
    cli()
