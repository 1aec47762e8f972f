"""Controlled-vocabulary recoding for taxon and distribution terms.

Each table carries its own default policy and the two must stay separate:

``RANK_VOCAB``
    Rank markers from the name parser mapped to ``taxonRank`` values.
    Anything unmapped, including a missing marker, becomes ``""``.

``THREAT_STATUS_VOCAB``
    Checklist threat statuses mapped to IUCN category codes.  Unmapped
    values pass through unchanged.
"""

from __future__ import annotations

from typing import Dict, Mapping, Optional

RANK_VOCAB: Dict[str, str] = {
    "agg.": "speciesAggregate",
    "infrasp.": "infraspecificname",
    "sp.": "species",
    "var.": "variety",
}

THREAT_STATUS_VOCAB: Dict[str, str] = {
    "endangered": "EN",
    "vulnerable": "VU",
}

COUNTRY_NAMES: Dict[str, str] = {
    "BE": "Belgium",
    "GB": "United Kingdom",
    "MK": "Macedonia",
    "NL": "The Netherlands",
}


def recode_rank(marker: Optional[str]) -> str:
    """Return the ``taxonRank`` term for a parser rank ``marker``.

    Keys are matched case-sensitively; unmapped markers yield ``""``.
    """

    if not marker:
        return ""
    return RANK_VOCAB.get(marker, "")


def recode_threat_status(value: Optional[str]) -> str:
    """Return the IUCN code for ``value`` or ``value`` itself when unmapped."""

    if not value:
        return ""
    return THREAT_STATUS_VOCAB.get(value, value)


def derive_locality(
    locality: Optional[str],
    country_code: Optional[str],
    country_names: Optional[Mapping[str, str]] = None,
) -> str:
    """Return ``locality`` or, when empty, the name of ``country_code``."""

    if locality:
        return locality
    names = COUNTRY_NAMES if country_names is None else country_names
    return names.get(country_code or "", "")


__all__ = [
    "RANK_VOCAB",
    "THREAT_STATUS_VOCAB",
    "COUNTRY_NAMES",
    "recode_rank",
    "recode_threat_status",
    "derive_locality",
]
