"""Validation command: check assertion tags in a finalized VCF.

A curated test VCF carries the expected verdict for each record in an
assertion tag. After 'finalize' (or 'run'), this command compares every
expected value against the classifier's output tag.
"""

import logging
import sys
from pathlib import Path

import click
import polars as pl

from pathogenicity_pipeline.config.loader import load_config
from pathogenicity_pipeline.validation import check_assertions, summarize_assertions
from pathogenicity_pipeline.vcf.models import MalformedRecordError

logger = logging.getLogger(__name__)


@click.command('validate')
@click.argument('input_path', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    '--output',
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help='Write per-assertion results to this TSV file'
)
@click.option(
    '--show-failures',
    type=int,
    default=20,
    help='Number of failed assertions to print (default: 20)'
)
@click.pass_context
def validate(ctx, input_path, output, show_failures):
    """Check assertion tags of a finalized VCF against its output tags.

    The tag mapping comes from the config's test.assertion_tags section,
    e.g. ASSERT_PATHOGENICITY -> FINAL_PATHOGENICITY. Exits with status 1
    when any assertion fails.

    Examples:

        pathogenicity-pipeline validate final.vcf.gz

        pathogenicity-pipeline validate final.vcf.gz --output assertions.tsv
    """
    config_path = ctx.obj['config_path']

    click.echo(click.style("=== Assertion Checks ===", bold=True))
    click.echo()

    try:
        config = load_config(config_path)
        assertion_tags = config.test.assertion_tags
        if not assertion_tags:
            click.echo(click.style(
                "Error: no assertion tags configured (test.assertion_tags)",
                fg='red'
            ), err=True)
            sys.exit(1)

        for expected_tag, output_tag in assertion_tags.items():
            click.echo(f"  {expected_tag} -> {output_tag}")
        click.echo()

        try:
            results = check_assertions(input_path, assertion_tags)
        except MalformedRecordError as e:
            click.echo(click.style(f"Error reading VCF: {e}", fg='red'), err=True)
            sys.exit(1)

        if output is not None:
            output.parent.mkdir(parents=True, exist_ok=True)
            results.write_csv(output, separator="\t", include_header=True)
            click.echo(click.style(f"Results saved: {output}", fg='green'))
            click.echo()

        summary = summarize_assertions(results)
        click.echo(click.style("=== Assertion Summary ===", bold=True))
        click.echo(f"Checked: {summary['checked']}")
        click.echo(f"Passed:  {summary['passed']}")
        click.echo(f"Failed:  {summary['failed']}")
        for tag, counts in summary['by_tag'].items():
            click.echo(f"  {tag}: {counts['passed']} passed, {counts['failed']} failed")
        click.echo()

        if summary['checked'] == 0:
            click.echo(click.style("No records carry an assertion tag.", fg='yellow'))
            return

        if summary['failed']:
            failures = results.filter(~pl.col("passed"))
            for row in failures.head(show_failures).iter_rows(named=True):
                click.echo(
                    f"  FAIL {row['chrom']}:{row['pos']} {row['ref']}>{row['alt']} "
                    f"{row['assertion_tag']}: expected {row['expected']}, got {row['observed']}",
                    err=True,
                )
            click.echo(click.style("ASSERTIONS FAILED", fg='red', bold=True))
            sys.exit(1)

        click.echo(click.style("ALL ASSERTIONS PASSED", fg='green', bold=True))

    except Exception as e:
        click.echo(click.style(f"Validation command failed: {e}", fg='red'), err=True)
        logger.exception("Validation command failed")
        sys.exit(1)
