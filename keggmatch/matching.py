"""Formula based KEGG matching with name similarity verification.

A compound is matched by searching KEGG for its molecular formula and
comparing the official name of every hit against the compound name.  The hit
with the highest similarity wins; its score decides whether the match is
accepted automatically or has to be verified by hand.

The database client is injectable.  Any object exposing
``find_by_formula(formula)`` and ``fetch_record(reference)`` (returning an
object with an ``official_name``) can stand in for :class:`~keggmatch.kegg.KeggClient`.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

import pandas as pd

from .kegg import KeggClient
from .models import RESULT_COLUMNS, MatchResult, MatchStatus
from .similarity import calculate_name_similarity
from .validate import validate_input, validate_new_columns

logger = logging.getLogger(__name__)

DEFAULT_SIMILARITY_THRESHOLD = 0.8
DEFAULT_DELAY = 1.0


def match_compound(
    name: str,
    formula: str,
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    *,
    client: Optional[Any] = None,
) -> MatchResult:
    """Find the KEGG compound best matching ``name`` among ``formula`` hits.

    Parameters
    ----------
    name:
        Compound name to compare against KEGG names (case-insensitive).
    formula:
        Molecular formula searched in KEGG (exact, case-sensitive).
    similarity_threshold:
        Minimum similarity for an automatic acceptance.
    client:
        Database client; a new :class:`~keggmatch.kegg.KeggClient` is used if
        omitted.

    Returns
    -------
    MatchResult
        ``No match`` if the formula search is empty, otherwise the best
        candidate classified as ``Auto-accepted`` or ``Needs verification``.
        Ties keep the first candidate in search order.

    Notes
    -----
    Failures of the lookup (network errors, HTTP errors, malformed entries)
    are logged and returned as an ``Error`` result instead of being raised.
    """

    client = client or KeggClient()
    try:
        if not formula:
            raise ValueError("formula is empty")
        references = list(client.find_by_formula(formula))
        if not references:
            logger.debug("No KEGG candidates for %s (%s)", name, formula)
            return MatchResult.no_match()

        best_id: Optional[str] = None
        best_name: Optional[str] = None
        best_similarity = float("-inf")
        for reference in references:
            record = client.fetch_record(reference)
            kegg_name = record.official_name
            similarity = calculate_name_similarity(name, kegg_name)
            logger.debug("%s vs %s (%s): %.3f", name, kegg_name, reference, similarity)
            if similarity > best_similarity:
                best_id, best_name, best_similarity = reference, kegg_name, similarity
    except Exception as exc:
        logger.warning("KEGG lookup failed for %s (%s): %s", name, formula, exc)
        return MatchResult.error(str(exc) or type(exc).__name__)

    return MatchResult.from_best(best_id, best_name, best_similarity, similarity_threshold)


def match_batch(
    df: pd.DataFrame,
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    delay: float = DEFAULT_DELAY,
    *,
    client: Optional[Any] = None,
) -> pd.DataFrame:
    """Match every row of ``df`` against KEGG.

    Rows are processed one at a time with ``delay`` seconds between lookups to
    respect the KEGG API rate limits (roughly one compound per second with the
    defaults).

    Parameters
    ----------
    df:
        DataFrame with ``Standardized_Name`` and ``Formula`` columns.
    similarity_threshold:
        Minimum similarity for an automatic acceptance.
    delay:
        Pause in seconds between rows.
    client:
        Database client shared by all rows.

    Returns
    -------
    pandas.DataFrame
        Copy of ``df`` with ``KEGG_ID``, ``KEGG_Name``, ``Similarity`` and
        ``Status`` columns appended. Row order and index are preserved.

    Raises
    ------
    ValueError
        If required columns are missing or a result column already exists.
        Nothing is queried in that case.
    """

    validate_input(df)
    validate_new_columns(df, RESULT_COLUMNS)
    client = client or KeggClient()

    total = len(df)
    rows = []
    for i, (name, formula) in enumerate(
        zip(df["Standardized_Name"], df["Formula"]), start=1
    ):
        name = "" if pd.isna(name) else str(name)
        formula = "" if pd.isna(formula) else str(formula)
        result = match_compound(name, formula, similarity_threshold, client=client)
        rows.append(result.as_row())
        logger.info("Processed %d/%d: %s - Status: %s", i, total, name, result.status_label)
        if i < total and delay > 0:
            time.sleep(delay)

    results = pd.DataFrame(rows, columns=RESULT_COLUMNS, index=df.index)
    out = df.copy()
    for col in RESULT_COLUMNS:
        out[col] = results[col]
    return out


def summarize_status(df: pd.DataFrame) -> pd.Series:
    """Count matched rows per status, folding error messages into ``Error``."""

    status = df["Status"].astype(str)
    status = status.where(~status.str.startswith(MatchStatus.ERROR.value), MatchStatus.ERROR.value)
    return status.value_counts()
