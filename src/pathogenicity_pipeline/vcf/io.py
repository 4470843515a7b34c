"""Line-level VCF reading and writing (plain text or gzip)."""

import gzip
from pathlib import Path
from typing import IO, Iterator

from pathogenicity_pipeline.vcf.header import VcfHeader
from pathogenicity_pipeline.vcf.models import MalformedRecordError


def open_vcf(path: Path | str, mode: str = "r") -> IO[str]:
    """Open a VCF for text reading or writing, using gzip for ``.gz`` paths.

    Undecodable bytes are carried as lone surrogates so that one bad row
    cannot stop the stream; parse_record rejects such rows, and header
    lines holding them are written back byte for byte.
    """
    path = Path(path)
    if path.suffix == ".gz":
        return gzip.open(path, mode + "t", encoding="utf-8", errors="surrogateescape", newline="\n")
    return open(path, mode, encoding="utf-8", errors="surrogateescape", newline="\n")


def read_header(lines: Iterator[tuple[int, str]]) -> VcfHeader:
    """
    Consume header lines from a numbered line iterator.

    Reads ``##`` meta lines until the ``#CHROM`` column header, which must be
    present before any data row.

    Args:
        lines: Iterator of (1-based line number, line) pairs; advanced past
            the column header on return

    Returns:
        VcfHeader with meta lines and column line

    Raises:
        MalformedRecordError: If a data row or EOF is reached before the
            column header line
    """
    header = VcfHeader()
    for line_number, line in lines:
        line = line.rstrip("\r\n")
        if line.startswith("##"):
            header.meta_lines.append(line)
        elif line.startswith("#"):
            header.column_line = line
            return header
        else:
            raise MalformedRecordError("data row found before the #CHROM header line", line_number)
    raise MalformedRecordError("input ended before the #CHROM header line")


def iter_data_lines(lines: Iterator[tuple[int, str]]) -> Iterator[tuple[int, str]]:
    """Yield numbered data lines, skipping blank lines."""
    for line_number, line in lines:
        line = line.rstrip("\r\n")
        if line:
            yield line_number, line


def numbered(handle: IO[str]) -> Iterator[tuple[int, str]]:
    return enumerate(handle, start=1)
