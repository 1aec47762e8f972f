"""Utilities for creating Darwin Core Archives.

This module builds a ``meta.xml`` descriptor for the taxon core and the
distribution extension written by :mod:`io_utils.write`.  The descriptor is
written alongside ``taxon.csv`` and ``distribution.csv`` and can optionally
be bundled into a ZIP file to form a complete Darwin Core Archive (DwC-A).
"""

from __future__ import annotations

from pathlib import Path
from xml.etree.ElementTree import Element, SubElement, tostring
from xml.dom import minidom
from zipfile import ZipFile, ZIP_DEFLATED
from typing import Any, Dict, List
from datetime import datetime, timezone
import subprocess
import logging

from .schema import DEFAULT_SCHEMA_URI, DISTRIBUTION_TERMS, TAXON_TERMS

DC_TERMS_URI = "http://purl.org/dc/terms/"
TAXON_ROW_TYPE = DEFAULT_SCHEMA_URI + "Taxon"
DISTRIBUTION_ROW_TYPE = "http://rs.gbif.org/terms/1.0/Distribution"

TERM_URIS: Dict[str, str] = {
    "language": DC_TERMS_URI + "language",
    "license": DC_TERMS_URI + "license",
    "rightsHolder": DC_TERMS_URI + "rightsHolder",
    "source": DC_TERMS_URI + "source",
    "threatStatus": "http://iucn.org/terms/threatStatus",
}

ARCHIVE_NAME = "dwca.zip"


def _term_uri(term: str) -> str:
    """Return the full URI for a Darwin Core or Dublin Core term."""

    return TERM_URIS.get(term, DEFAULT_SCHEMA_URI + term)


def build_manifest(
    dataset: Dict[str, Any] | None = None,
    counts: Dict[str, int] | None = None,
    include_git_info: bool = True,
) -> Dict[str, Any]:
    """Return run metadata for a conversion.

    Parameters
    ----------
    dataset:
        Dataset-level configuration used for the run.
    counts:
        Row counts per written table.
    include_git_info:
        Whether to include the git commit of the working directory.
    """
    logger = logging.getLogger(__name__)

    manifest: Dict[str, Any] = {
        "format_version": "1.0.0",
        "export_type": "darwin_core_archive",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "dataset": dataset or {},
        "counts": counts or {},
    }

    if include_git_info:
        try:
            commit = subprocess.check_output(
                ["git", "rev-parse", "HEAD"], text=True, stderr=subprocess.DEVNULL
            ).strip()
            manifest["git_commit"] = commit
        except (subprocess.CalledProcessError, FileNotFoundError):
            logger.debug("Git information not available")
            manifest["git_commit"] = "unknown"

    return manifest


def _add_table(
    root: Element, tag: str, row_type: str, location: str, columns: List[str], id_tag: str, id_index: int
) -> None:
    table = SubElement(
        root,
        tag,
        {
            "encoding": "UTF-8",
            "linesTerminatedBy": "\\n",
            "fieldsTerminatedBy": ",",
            "fieldsEnclosedBy": '"',
            "ignoreHeaderLines": "1",
            "rowType": row_type,
        },
    )
    files_el = SubElement(table, "files")
    SubElement(files_el, "location").text = location
    SubElement(table, id_tag, index=str(id_index))
    for idx, term in enumerate(columns):
        SubElement(table, "field", index=str(idx), term=_term_uri(term))


def build_meta_xml(output_dir: Path) -> Path:
    """Create ``meta.xml`` for a Darwin Core Archive.

    Parameters
    ----------
    output_dir:
        Directory containing ``taxon.csv`` and ``distribution.csv``.

    Returns
    -------
    Path to the written ``meta.xml`` file.
    """
    from io_utils.write import DISTRIBUTION_FILE, TAXON_FILE

    output_dir.mkdir(parents=True, exist_ok=True)
    root = Element("meta", xmlns="http://rs.tdwg.org/dwc/text/")
    _add_table(
        root, "core", TAXON_ROW_TYPE, TAXON_FILE, TAXON_TERMS, "id", TAXON_TERMS.index("taxonID")
    )
    _add_table(
        root,
        "extension",
        DISTRIBUTION_ROW_TYPE,
        DISTRIBUTION_FILE,
        DISTRIBUTION_TERMS,
        "coreid",
        DISTRIBUTION_TERMS.index("taxonID"),
    )

    xml_bytes = tostring(root, encoding="utf-8")
    pretty = minidom.parseString(xml_bytes).toprettyxml(indent="  ", encoding="UTF-8")
    meta_path = output_dir / "meta.xml"
    meta_path.write_bytes(pretty)
    return meta_path


def create_archive(output_dir: Path, *, compress: bool = False) -> Path:
    """Write ``meta.xml`` and optionally bundle the archive files into a ZIP.

    Returns
    -------
    Path to ``meta.xml`` if ``compress`` is ``False``; otherwise the path to the
    created ZIP file.
    """
    from io_utils.write import DISTRIBUTION_FILE, TAXON_FILE

    logger = logging.getLogger(__name__)
    meta_path = build_meta_xml(output_dir)
    if not compress:
        return meta_path

    archive_path = output_dir / ARCHIVE_NAME
    logger.info(f"Creating archive: {archive_path.name}")
    with ZipFile(archive_path, "w", ZIP_DEFLATED) as zf:
        files_added = []
        for name in (TAXON_FILE, DISTRIBUTION_FILE, "meta.xml", "manifest.json"):
            file_path = output_dir / name
            if file_path.exists():
                zf.write(file_path, arcname=name)
                files_added.append(name)
            else:
                logger.warning(f"Requested file {name} not found, skipping")
        logger.info(f"Archive created with {len(files_added)} files: {', '.join(files_added)}")
    return archive_path
