from pathlib import Path
from typing import Iterable, Dict, Any, List
import csv
import json
import logging

from dwc.schema import DISTRIBUTION_TERMS, TAXON_TERMS, DistributionRecord, TaxonRecord

logger = logging.getLogger(__name__)

TAXON_FILE = "taxon.csv"
DISTRIBUTION_FILE = "distribution.csv"


def write_manifest(output_dir: Path, meta: Dict[str, Any]) -> None:
    output_dir.mkdir(parents=True, exist_ok=True)
    manifest_path = output_dir / "manifest.json"
    manifest_path.write_text(json.dumps(meta, indent=2, sort_keys=True), encoding="utf-8")


def write_table_csv(csv_path: Path, columns: List[str], rows: Iterable[Dict[str, Any]]) -> int:
    """Write ``rows`` to ``csv_path`` with a header row in ``columns`` order.

    Missing or ``None`` values are written as empty fields.  Line endings are
    fixed to ``\\n`` so output is byte-identical across platforms.
    """
    csv_path.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with csv_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=columns, lineterminator="\n")
        writer.writeheader()
        for row in rows:
            writer.writerow({k: "" if row.get(k) is None else row.get(k) for k in columns})
            count += 1
    logger.info("Wrote %d rows to %s", count, csv_path)
    return count


def write_taxon_csv(output_dir: Path, records: Iterable[TaxonRecord]) -> Path:
    csv_path = output_dir / TAXON_FILE
    write_table_csv(csv_path, TAXON_TERMS, (r.to_dict() for r in records))
    return csv_path


def write_distribution_csv(output_dir: Path, records: Iterable[DistributionRecord]) -> Path:
    csv_path = output_dir / DISTRIBUTION_FILE
    write_table_csv(csv_path, DISTRIBUTION_TERMS, (r.to_dict() for r in records))
    return csv_path
