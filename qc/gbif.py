"""GBIF name parser interface used to enrich checklist rows.

The module wraps the public GBIF name parser (reached through ``pygbif``)
that decomposes scientific names into their nomenclatural parts.  Only the
parse classification and the rank marker are used downstream: the marker
is joined back onto every row sharing a scientific name, and names that do
not parse cleanly are listed for manual review.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import requests
from pygbif import species

from dwc.schema import EnrichedRow, SourceRow
from errors import NameParsingError

DEFAULT_TIMEOUT = 30.0

# Name type GBIF assigns to well-formed scientific names
SCIENTIFIC_TYPE = "SCIENTIFIC"


@dataclass(frozen=True)
class ParsedName:
    """Parse result for a single name string."""

    scientificname: str
    type: str = ""
    parsed: bool = False
    parsedpartially: bool = False
    rankmarker: str = ""
    canonicalname: str = ""

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> "ParsedName":
        """Build a result from one entry of the GBIF parser response."""
        state = payload.get("state")
        parsed = payload.get("parsed")
        if parsed is None:
            parsed = state in ("COMPLETE", "PARTIAL")
        partially = payload.get("parsedPartially")
        if partially is None:
            partially = state == "PARTIAL"
        return cls(
            scientificname=payload.get("scientificName") or "",
            type=payload.get("type") or "",
            parsed=bool(parsed),
            parsedpartially=bool(partially),
            rankmarker=payload.get("rankMarker") or "",
            canonicalname=payload.get("canonicalName") or "",
        )

    @property
    def needs_review(self) -> bool:
        """``True`` unless the name parsed fully as a scientific name."""
        return not (self.type == SCIENTIFIC_TYPE and self.parsed and not self.parsedpartially)


@dataclass
class NameParser:
    """Client for the GBIF name parser.

    Every call sends all names in a single request.  Network or service
    failures raise :class:`NameParsingError`; no retries are attempted.
    """

    timeout: float | None = DEFAULT_TIMEOUT
    _logger: Optional[logging.Logger] = None

    def __post_init__(self):
        if self._logger is None:
            self._logger = logging.getLogger(__name__)

    @classmethod
    def from_config(cls, cfg: Dict[str, Any]) -> "NameParser":
        """Create a parser instance from configuration settings."""
        gbif_cfg = cfg.get("gbif", {})
        return cls(timeout=gbif_cfg.get("timeout", DEFAULT_TIMEOUT))

    def parse_names(self, names: Sequence[str]) -> Dict[str, ParsedName]:
        """Parse ``names`` and return results keyed by the submitted string.

        Names absent from the response map to an empty, unparsed result.
        """
        names = list(names)
        if not names:
            return {}

        kwargs = {"timeout": self.timeout} if self.timeout else {}
        try:
            data = species.name_parser(names, **kwargs)
        except (requests.RequestException, ValueError) as exc:
            raise NameParsingError("parser_failed", f"GBIF name parser failed: {exc}") from exc
        if not isinstance(data, list):
            raise NameParsingError("bad_response", f"unexpected parser response: {data!r}")

        results: Dict[str, ParsedName] = {}
        for name, entry in zip(names, data):
            if isinstance(entry, dict):
                # results come back in submission order
                results[name] = ParsedName.from_response(entry)
        self._logger.info("Parsed %d distinct names with GBIF", len(names))
        return {name: results.get(name, ParsedName(scientificname=name)) for name in names}


def distinct_names(rows: Iterable[SourceRow]) -> List[str]:
    """Return the non-empty scientific names in order of first occurrence."""
    seen: Dict[str, None] = {}
    for row in rows:
        if row.raw_scientific_name:
            seen.setdefault(row.raw_scientific_name, None)
    return list(seen)


def flag_for_review(parsed: Mapping[str, ParsedName]) -> List[ParsedName]:
    """Return and log results that did not parse cleanly.

    The listing is advisory; callers carry on with whatever rank marker
    the parser returned.
    """
    logger = logging.getLogger(__name__)
    flagged = [result for result in parsed.values() if result.needs_review]
    for result in flagged:
        logger.warning(
            "Review name %r: type=%s parsed=%s parsedpartially=%s",
            result.scientificname,
            result.type or "-",
            result.parsed,
            result.parsedpartially,
        )
    return flagged


def apply_corrections(
    rows: Iterable[SourceRow], corrections: Mapping[str, str]
) -> tuple[SourceRow, ...]:
    """Return ``rows`` with scientific names replaced through ``corrections``.

    Matching is on the exact name string.
    """
    corrected: List[SourceRow] = []
    changed = 0
    for row in rows:
        fixed = corrections.get(row.raw_scientific_name)
        if fixed is not None and fixed != row.raw_scientific_name:
            row = row.model_copy(update={"raw_scientific_name": fixed})
            changed += 1
        corrected.append(row)
    logging.getLogger(__name__).info("Applied name corrections to %d rows", changed)
    return tuple(corrected)


def attach_rank_markers(
    rows: Iterable[SourceRow], parsed: Mapping[str, ParsedName]
) -> tuple[EnrichedRow, ...]:
    """Join the parsed rank marker onto each row by scientific name."""
    enriched = []
    for row in rows:
        result = parsed.get(row.raw_scientific_name)
        marker = result.rankmarker if result else ""
        enriched.append(EnrichedRow.model_validate({**row.model_dump(), "raw_rankmarker": marker}))
    return tuple(enriched)


def parse_checklist_names(
    rows: Sequence[SourceRow],
    parser: NameParser,
    corrections: Mapping[str, str] | None = None,
) -> tuple[tuple[EnrichedRow, ...], List[ParsedName]]:
    """Parse, correct and re-parse checklist names.

    Returns the rows enriched with rank markers together with the names
    still flagged for review after correction.
    """
    first = parser.parse_names(distinct_names(rows))
    flag_for_review(first)

    corrected = apply_corrections(rows, corrections or {})
    second = parser.parse_names(distinct_names(corrected))
    flagged = flag_for_review(second)
    return attach_rank_markers(corrected, second), flagged


__all__ = [
    "DEFAULT_TIMEOUT",
    "SCIENTIFIC_TYPE",
    "ParsedName",
    "NameParser",
    "distinct_names",
    "flag_for_review",
    "apply_corrections",
    "attach_rank_markers",
    "parse_checklist_names",
]
