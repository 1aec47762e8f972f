from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, ValidationError

from errors import ConversionError

DEFAULT_SCHEMA_URI = "http://rs.tdwg.org/dwc/terms/"

# Prepended to every spreadsheet column so that source fields never collide
# with Darwin Core output terms.
SOURCE_PREFIX = "raw_"

# Semantic input fields every checklist must provide (before prefixing)
SOURCE_FIELDS: List[str] = [
    "scientific_name",
    "kingdom",
    "country_code",
    "locality",
    "occurrence_status",
    "threat_status",
    "source",
    "remarks",
]

TAXON_TERMS: List[str] = [
    "language",
    "license",
    "rightsHolder",
    "datasetID",
    "institutionCode",
    "datasetName",
    "taxonID",
    "scientificName",
    "kingdom",
    "taxonRank",
    "nomenclaturalCode",
]

DISTRIBUTION_TERMS: List[str] = [
    "taxonID",
    "locality",
    "countryCode",
    "occurrenceStatus",
    "threatStatus",
    "source",
    "occurrenceRemarks",
]


class SourceRow(BaseModel):
    """One checklist row as loaded from the spreadsheet.

    Field names carry the ``raw_`` prefix.  Additional spreadsheet columns
    are retained as extra attributes but never written out.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    raw_scientific_name: str = ""
    raw_kingdom: str = ""
    raw_country_code: str = ""
    raw_locality: str = ""
    raw_occurrence_status: str = ""
    raw_threat_status: str = ""
    raw_source: str = ""
    raw_remarks: str = ""


class EnrichedRow(SourceRow):
    """A source row joined with its parsed rank marker and taxon identifier."""

    raw_rankmarker: str = ""
    taxon_id: str = ""


class _OutputRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    def to_dict(self) -> Dict[str, str]:
        """Return a dictionary representation suitable for CSV writing.

        ``None`` values are converted to empty strings and keys follow the
        declared field order.
        """

        return {name: getattr(self, name) or "" for name in type(self).model_fields}


class TaxonRecord(_OutputRecord):
    """Row of the Darwin Core taxon core."""

    language: str = ""
    license: str = ""
    rightsHolder: str = ""
    datasetID: str = ""
    institutionCode: str = ""
    datasetName: str = ""
    taxonID: str
    scientificName: str = ""
    kingdom: str = ""
    taxonRank: str = ""
    nomenclaturalCode: str = ""


class DistributionRecord(_OutputRecord):
    """Row of the GBIF distribution extension."""

    taxonID: str
    locality: str = ""
    countryCode: str = ""
    occurrenceStatus: str = ""
    threatStatus: str = ""
    source: str = ""
    occurrenceRemarks: str = ""


class DatasetMetadata(BaseModel):
    """Dataset-level constants copied onto every taxon record."""

    model_config = ConfigDict(frozen=True)

    shortname: str
    language: str
    license: str
    rights_holder: str
    dataset_id: str
    institution_code: str
    dataset_name: str
    nomenclatural_code: str

    @classmethod
    def from_config(cls, cfg: Dict[str, Any]) -> "DatasetMetadata":
        """Build metadata from the ``[dataset]`` section of the configuration."""
        try:
            return cls(**cfg.get("dataset", {}))
        except ValidationError as exc:
            raise ConversionError("invalid_config", f"[dataset] section: {exc}") from exc


__all__ = [
    "DEFAULT_SCHEMA_URI",
    "SOURCE_PREFIX",
    "SOURCE_FIELDS",
    "TAXON_TERMS",
    "DISTRIBUTION_TERMS",
    "SourceRow",
    "EnrichedRow",
    "TaxonRecord",
    "DistributionRecord",
    "DatasetMetadata",
]
