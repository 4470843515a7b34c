"""VCF record field model: per-row INFO multimap, header declarations, and line I/O."""

from pathogenicity_pipeline.vcf.header import InfoDeclaration, VcfHeader
from pathogenicity_pipeline.vcf.io import iter_data_lines, numbered, open_vcf, read_header
from pathogenicity_pipeline.vcf.models import (
    InfoFields,
    MalformedRecordError,
    VariantRecord,
    parse_record,
)

__all__ = [
    "InfoDeclaration",
    "VcfHeader",
    "InfoFields",
    "MalformedRecordError",
    "VariantRecord",
    "parse_record",
    "open_vcf",
    "read_header",
    "iter_data_lines",
    "numbered",
]
