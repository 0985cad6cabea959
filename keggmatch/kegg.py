"""Utilities for querying the KEGG COMPOUND database.

This module exposes a small client for the `KEGG REST`_ API.  Only the two
calls needed for formula based matching are implemented: a formula search
returning compound references and a record lookup returning the compound
names.

KEGG answers with plain text.  ``find`` responses are tab separated
``<entry>\\t<value>`` lines while ``get`` responses use the KEGG flat-file
format where the first twelve columns hold the field name.

.. _KEGG REST: https://www.kegg.jp/kegg/rest/keggapi.html
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import List, Optional
from urllib.parse import quote

import requests

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

KEGG_BASE_URL = "https://rest.kegg.jp"
KEGG_FIND_FORMULA_PATH = "/find/compound/{}/formula"
KEGG_GET_PATH = "/get/{}"
DEFAULT_TIMEOUT = 30.0

# Width of the field-name column in KEGG flat files
_FIELD_WIDTH = 12


@dataclass(frozen=True)
class KeggRecord:
    """Subset of a KEGG COMPOUND entry used for matching."""

    entry_id: str
    names: List[str] = field(default_factory=list)

    @property
    def official_name(self) -> str:
        """First listed ``NAME`` of the entry."""
        return self.names[0]


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------

def parse_find_output(text: str, formula: Optional[str] = None) -> List[str]:
    """Return entry identifiers from a KEGG ``find`` response.

    Parameters
    ----------
    text:
        Raw response body with ``<entry>\\t<value>`` lines.
    formula:
        If given, keep only entries whose value equals ``formula`` exactly.
        The KEGG formula search also returns partial matches (e.g. a query for
        ``C6H12O6`` lists ``C16H12O6``), which are discarded here.

    Returns
    -------
    list of str
        Entry identifiers such as ``"cpd:C00031"`` in response order.
    """

    entries: List[str] = []
    for line in text.splitlines():
        if not line.strip():
            continue
        parts = line.split("\t", 1)
        if len(parts) != 2:
            logger.debug("Skipping malformed find line: %r", line)
            continue
        entry, value = parts[0].strip(), parts[1].strip()
        if formula is not None and value != formula:
            continue
        entries.append(entry)
    return entries


def parse_kegg_record(text: str, entry_id: str = "") -> KeggRecord:
    """Parse a KEGG flat-file entry into a :class:`KeggRecord`.

    ``NAME`` may span several lines; each continuation line holds one more
    synonym terminated by ``;``.  Other fields are ignored.  Only the first
    entry of a multi-entry response is parsed.

    Raises
    ------
    ValueError
        If the entry lists no names.
    """

    names: List[str] = []
    current_key = ""

    for line in text.splitlines():
        if line.startswith("///"):
            break
        if not line.strip():
            continue
        key = line[:_FIELD_WIDTH].strip()
        value = line[_FIELD_WIDTH:].strip()
        if key:
            current_key = key
        if current_key == "ENTRY" and key and not entry_id:
            entry_id = "cpd:" + value.split()[0] if value else ""
        elif current_key == "NAME":
            name = value.rstrip(";").strip()
            if name:
                names.append(name)

    if not names:
        msg = f"KEGG entry {entry_id or '<unknown>'} has no NAME field"
        raise ValueError(msg)

    return KeggRecord(entry_id=entry_id, names=names)


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

class KeggClient:
    """Minimal KEGG REST client.

    Parameters
    ----------
    session:
        Optional :class:`requests.Session` for connection pooling. If not
        provided a session is created for the lifetime of the client.
    base_url:
        KEGG REST endpoint.
    timeout:
        Timeout in seconds applied to every request.
    """

    def __init__(
        self,
        *,
        session: Optional[requests.Session] = None,
        base_url: str = KEGG_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.session = session or requests.Session()
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _get(self, path: str) -> Optional[str]:
        url = self.base_url + path
        logger.debug("Requesting %s", url)
        response = self.session.get(url, timeout=self.timeout)
        # KEGG signals an unknown query or entry with HTTP 400/404.
        if response.status_code in {400, 404}:
            return None
        response.raise_for_status()
        return response.text

    def find_by_formula(self, formula: str) -> List[str]:
        """Return compound references whose formula equals ``formula``.

        The comparison is exact and case-sensitive.  An empty list is returned
        when nothing matches.

        Raises
        ------
        requests.RequestException
            On network failures or unexpected HTTP errors.
        """

        text = self._get(KEGG_FIND_FORMULA_PATH.format(quote(formula, safe="")))
        if not text:
            logger.debug("No KEGG compounds with formula %s", formula)
            return []
        return parse_find_output(text, formula=formula)

    def fetch_record(self, reference: str) -> KeggRecord:
        """Retrieve and parse the KEGG entry ``reference``.

        Raises
        ------
        requests.RequestException
            On network failures or unexpected HTTP errors.
        ValueError
            If the entry does not exist or lists no names.
        """

        text = self._get(KEGG_GET_PATH.format(quote(reference, safe=":")))
        if not text:
            msg = f"KEGG entry {reference} not found"
            raise ValueError(msg)
        return parse_kegg_record(text, entry_id=reference)
