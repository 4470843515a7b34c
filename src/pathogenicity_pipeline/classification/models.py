"""Final verdict record and its output tags."""

from pydantic import BaseModel, ConfigDict, field_validator

from pathogenicity_pipeline.vcf.header import InfoDeclaration

MISSING = "."

FINAL_PATHOGENICITY_TAG = "FINAL_PATHOGENICITY"
FINAL_DISEASES_TAG = "FINAL_DISEASE"
FINAL_PATHOGENICITY_SOURCE_TAG = "FINAL_PATHOGENICITY_SOURCE"
FINAL_PMIDS_TAG = "FINAL_PMIDS"
FINAL_PATHOGENICITY_REASON_TAG = "FINAL_PATHOGENICITY_REASON"
FINAL_COMMENTS_TAG = "FINAL_COMMENTS"
CLINVAR_HGMD_CONFLICT_TAG = "CLINVAR_HGMD_CONFLICTED"

FINAL_DECLARATIONS = [
    InfoDeclaration(FINAL_PATHOGENICITY_TAG, "Final curated pathogenicity"),
    InfoDeclaration(FINAL_DISEASES_TAG, "Final curated disease"),
    InfoDeclaration(FINAL_PATHOGENICITY_SOURCE_TAG, "Source for final pathogenicity"),
    InfoDeclaration(FINAL_PMIDS_TAG, "PubMed IDs"),
    InfoDeclaration(FINAL_PATHOGENICITY_REASON_TAG, "Brief reason for final pathogenicity"),
    InfoDeclaration(FINAL_COMMENTS_TAG, "Additional comments from curator"),
    InfoDeclaration(CLINVAR_HGMD_CONFLICT_TAG, "ClinVar and HGMD disagree (0 - No, 1 - Yes)"),
]

FINAL_TAGS = [d.id for d in FINAL_DECLARATIONS]


class FinalVerdict(BaseModel):
    """The single, write-once pathogenicity call for a variant.

    Every field is populated; anything a branch does not use is the literal
    '.' so output columns stay aligned. Blank strings are coerced to '.'.
    """

    model_config = ConfigDict(frozen=True)

    pathogenicity: str
    source: str = MISSING
    reason: str = MISSING
    diseases: str = MISSING
    pmids: str = MISSING
    comments: str = MISSING
    clinvar_hgmd_conflict: str = MISSING

    @field_validator("*", mode="before")
    @classmethod
    def blank_is_missing(cls, v):
        if v is None or (isinstance(v, str) and v.strip() == ""):
            return MISSING
        return v

    @field_validator("clinvar_hgmd_conflict")
    @classmethod
    def check_conflict_flag(cls, v: str) -> str:
        if v not in ("0", "1", MISSING):
            raise ValueError(f"clinvar_hgmd_conflict must be '0', '1' or '.', got {v!r}")
        return v

    def to_fields(self) -> list[tuple[str, str]]:
        """Ordered (tag, value) pairs for the emitter."""
        return [
            (FINAL_PATHOGENICITY_TAG, self.pathogenicity),
            (FINAL_PMIDS_TAG, self.pmids),
            (FINAL_COMMENTS_TAG, self.comments),
            (FINAL_PATHOGENICITY_SOURCE_TAG, self.source),
            (FINAL_PATHOGENICITY_REASON_TAG, self.reason),
            (FINAL_DISEASES_TAG, self.diseases),
            (CLINVAR_HGMD_CONFLICT_TAG, self.clinvar_hgmd_conflict),
        ]
