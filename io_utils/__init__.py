from .logs import setup_logging
from .read import read_checklist
from .write import (
    DISTRIBUTION_FILE,
    TAXON_FILE,
    write_distribution_csv,
    write_manifest,
    write_table_csv,
    write_taxon_csv,
)

__all__ = [
    "setup_logging",
    "read_checklist",
    "DISTRIBUTION_FILE",
    "TAXON_FILE",
    "write_distribution_csv",
    "write_manifest",
    "write_table_csv",
    "write_taxon_csv",
]
