"""Quality control helpers for checklist names.

``NameParser``
    Client for the GBIF name parser.  Returns a :class:`ParsedName` per
    distinct scientific name.

``flag_for_review``
    List the names that did not parse cleanly as scientific names.  The
    listing is advisory and never blocks a conversion run.

``parse_checklist_names``
    Run the parse / correct / re-parse sequence and join rank markers back
    onto the checklist rows.
"""

from __future__ import annotations

from .gbif import (
    DEFAULT_TIMEOUT,
    SCIENTIFIC_TYPE,
    NameParser,
    ParsedName,
    apply_corrections,
    attach_rank_markers,
    distinct_names,
    flag_for_review,
    parse_checklist_names,
)

__all__ = [
    "DEFAULT_TIMEOUT",
    "SCIENTIFIC_TYPE",
    "NameParser",
    "ParsedName",
    "apply_corrections",
    "attach_rank_markers",
    "distinct_names",
    "flag_for_review",
    "parse_checklist_names",
]
