"""Shared fixtures for checklist conversion tests."""

import csv

import pytest

from dwc.schema import DatasetMetadata, EnrichedRow, SourceRow

HEADER = [
    "scientific_name",
    "kingdom",
    "country_code",
    "locality",
    "occurrence_status",
    "threat_status",
    "source",
    "remarks",
]


@pytest.fixture
def dataset():
    """Dataset constants as they would come from the [dataset] config section."""
    return DatasetMetadata(
        shortname="test-checklist",
        language="en",
        license="http://creativecommons.org/publicdomain/zero/1.0/",
        rights_holder="Test Institute",
        dataset_id="https://doi.org/10.0000/test",
        institution_code="TI",
        dataset_name="Test checklist",
        nomenclatural_code="ICZN",
    )


@pytest.fixture
def write_checklist(tmp_path):
    """Return a helper that writes checklist rows to a CSV file."""

    def _write(rows, header=HEADER, name="checklist.csv"):
        path = tmp_path / name
        with path.open("w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(header)
            writer.writerows(rows)
        return path

    return _write


def _make_row(name="Foo bar", kingdom="Animalia", **fields):
    data = {"raw_scientific_name": name, "raw_kingdom": kingdom}
    data.update({f"raw_{key}": value for key, value in fields.items()})
    return SourceRow(**data)


def _make_enriched(name="Foo bar", kingdom="Animalia", taxon_id="", rankmarker="", **fields):
    row = _make_row(name, kingdom, **fields)
    return EnrichedRow(**row.model_dump(), raw_rankmarker=rankmarker, taxon_id=taxon_id)


@pytest.fixture
def make_row():
    """Factory for SourceRow objects built from unprefixed field names."""
    return _make_row


@pytest.fixture
def make_enriched():
    """Factory for EnrichedRow objects built from unprefixed field names."""
    return _make_enriched
