from .schema import (
    DatasetMetadata,
    DistributionRecord,
    EnrichedRow,
    SourceRow,
    TaxonRecord,
    DISTRIBUTION_TERMS,
    SOURCE_FIELDS,
    SOURCE_PREFIX,
    TAXON_TERMS,
)
from .identifiers import assign_taxon_ids, taxon_id
from .mapper import derive_distribution, derive_taxa, map_distribution, map_taxon
from .normalize import (
    COUNTRY_NAMES,
    RANK_VOCAB,
    THREAT_STATUS_VOCAB,
    derive_locality,
    recode_rank,
    recode_threat_status,
)
from .validators import check_referential_integrity, validate, validate_taxon_ids_unique
from .archive import build_manifest, build_meta_xml, create_archive

__all__ = [
    "DatasetMetadata",
    "DistributionRecord",
    "EnrichedRow",
    "SourceRow",
    "TaxonRecord",
    "DISTRIBUTION_TERMS",
    "SOURCE_FIELDS",
    "SOURCE_PREFIX",
    "TAXON_TERMS",
    "assign_taxon_ids",
    "taxon_id",
    "derive_distribution",
    "derive_taxa",
    "map_distribution",
    "map_taxon",
    "COUNTRY_NAMES",
    "RANK_VOCAB",
    "THREAT_STATUS_VOCAB",
    "derive_locality",
    "recode_rank",
    "recode_threat_status",
    "check_referential_integrity",
    "validate",
    "validate_taxon_ids_unique",
    "build_manifest",
    "build_meta_xml",
    "create_archive",
]
