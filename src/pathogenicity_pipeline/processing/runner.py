"""Stream a VCF through the classification stages, one record at a time.

Records are independent, so they may be classified in a process pool. Each
batch is mapped in order, which keeps output rows in input order.
"""

import logging
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from functools import partial
from itertools import islice
from pathlib import Path
from typing import Iterator, Optional, Union

import structlog

from pathogenicity_pipeline.config.schema import PipelineConfig
from pathogenicity_pipeline.log_config import configure_logging
from pathogenicity_pipeline.output.summary import VerdictRow
from pathogenicity_pipeline.processing.stages import (
    ALL_STAGES,
    Stage,
    classify_record,
    stage_declarations,
)
from pathogenicity_pipeline.vcf.io import iter_data_lines, numbered, open_vcf, read_header
from pathogenicity_pipeline.vcf.models import MalformedRecordError, parse_record

logger = structlog.get_logger()

# Records handed to the pool per worker in each batch
BATCH_SIZE_PER_WORKER = 2000


@dataclass(frozen=True)
class RecordFailure:
    """A row that could not be classified and was left out of the output."""

    line_number: int
    message: str


@dataclass(frozen=True)
class ClassifiedLine:
    line_number: int
    text: str
    verdict: Optional[VerdictRow] = None


@dataclass
class RunSummary:
    """Outcome of one pass over a VCF."""

    records_read: int = 0
    records_written: int = 0
    failures: list[RecordFailure] = field(default_factory=list)
    verdicts: list[VerdictRow] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def classify_line(
    item: tuple[int, str],
    config: PipelineConfig,
    stages: tuple[Stage, ...],
) -> Union[ClassifiedLine, RecordFailure]:
    """Parse, classify and re-serialize one numbered data line.

    Record-scoped errors are returned as RecordFailure instead of raised.
    """
    line_number, line = item
    try:
        record = parse_record(line, line_number)
        verdict = classify_record(record, config, stages)
    except MalformedRecordError as e:
        return RecordFailure(line_number=line_number, message=e.reason)
    return ClassifiedLine(line_number=line_number, text=record.to_line(), verdict=verdict)


def _batches(items: Iterator, size: int) -> Iterator[list]:
    while True:
        batch = list(islice(items, size))
        if not batch:
            return
        yield batch


def process_vcf(
    input_path: Path,
    output_path: Path,
    config: PipelineConfig,
    stages: tuple[Stage, ...] = ALL_STAGES,
    workers: Optional[int] = None,
) -> RunSummary:
    """
    Classify every record of a VCF and write the augmented VCF.

    Header lines are copied verbatim, with declarations for the new INFO tags
    inserted just before the #CHROM line. Malformed rows are logged, reported
    in the summary, and omitted; the rest of the file is still processed.

    Args:
        input_path: Input VCF (plain or .gz)
        output_path: Output VCF (gzip when the name ends in .gz)
        config: Pipeline configuration
        stages: Stages to apply to each record
        workers: Worker processes (default: config.workers); 1 runs inline

    Returns:
        RunSummary with counts, failures and (for finalization) verdict rows

    Raises:
        MalformedRecordError: If the header itself is malformed (no #CHROM line)
    """
    workers = workers or config.workers
    summary = RunSummary()
    worker = partial(classify_line, config=config, stages=stages)

    logger.info(
        "process_vcf_start",
        input=str(input_path),
        output=str(output_path),
        stages=[s.value for s in stages],
        workers=workers,
    )

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open_vcf(input_path) as f_in, open_vcf(output_path, "w") as f_out:
        lines = numbered(f_in)
        header = read_header(lines)
        for declaration in stage_declarations(stages, config):
            header.add_info(declaration)
        for header_line in header.lines():
            f_out.write(header_line + "\n")

        data_lines = iter_data_lines(lines)
        if workers == 1:
            results = map(worker, data_lines)
            _collect(results, f_out, summary)
        else:
            level = logging.getLogger().getEffectiveLevel()
            with ProcessPoolExecutor(
                max_workers=workers,
                initializer=configure_logging,
                initargs=(level,),
            ) as executor:
                for batch in _batches(data_lines, BATCH_SIZE_PER_WORKER * workers):
                    results = executor.map(worker, batch, chunksize=max(1, len(batch) // (workers * 4)))
                    _collect(results, f_out, summary)

    logger.info(
        "process_vcf_complete",
        records_read=summary.records_read,
        records_written=summary.records_written,
        failures=len(summary.failures),
    )
    return summary


def _collect(results, f_out, summary: RunSummary) -> None:
    for result in results:
        summary.records_read += 1
        if isinstance(result, RecordFailure):
            logger.warning("record_malformed", line_number=result.line_number, reason=result.message)
            summary.failures.append(result)
            continue
        f_out.write(result.text + "\n")
        summary.records_written += 1
        if result.verdict is not None:
            summary.verdicts.append(result.verdict)
