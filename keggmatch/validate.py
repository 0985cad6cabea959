"""Validation helpers for KEGG compound matching."""

from __future__ import annotations

import logging
from typing import Iterable

import pandas as pd

from .models import MatchStatus

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ["Standardized_Name", "Formula"]


def validate_input(df: pd.DataFrame, required: Iterable[str] | None = None) -> None:
    """Validate input DataFrame columns.

    Parameters
    ----------
    df:
        Input DataFrame to validate.
    required:
        Required column names. Defaults to :data:`REQUIRED_COLUMNS`.

    Raises
    ------
    ValueError
        If required columns are missing. The message names every missing
        column.
    """

    required_cols = list(required) if required is not None else REQUIRED_COLUMNS
    missing = [col for col in required_cols if col not in df.columns]
    if missing:
        msg = f"Missing required columns: {', '.join(missing)}"
        logger.error(msg)
        raise ValueError(msg)


def validate_new_columns(df: pd.DataFrame, columns: Iterable[str]) -> None:
    """Ensure that ``columns`` can be added to ``df`` without overwriting data.

    Raises
    ------
    ValueError
        If any of ``columns`` already exists in ``df``. The message names
        every clashing column.
    """

    clashing = [col for col in columns if col in df.columns]
    if clashing:
        msg = f"Input already contains output columns: {', '.join(clashing)}"
        logger.error(msg)
        raise ValueError(msg)


def check_issues(df: pd.DataFrame) -> pd.DataFrame:
    """Flag matched rows that need a second look.

    The function adds an ``issues`` column where each row lists pipe-separated
    problem codes. Supported codes are ``empty_name``, ``no_match``,
    ``low_similarity`` and ``lookup_error``.  Rows with an ``Error`` or
    ``Needs verification`` status are the candidates for a re-run or manual
    review.

    Raises
    ------
    ValueError
        If ``df`` already has an ``issues`` column.
    """

    validate_new_columns(df, ["issues"])

    issue_list: list[str] = []
    for _, row in df.iterrows():
        row_issues: list[str] = []
        name = row.get("Standardized_Name", "")
        status = str(row.get("Status", ""))

        if pd.isna(name) or not str(name).strip():
            row_issues.append("empty_name")
        if status == MatchStatus.NO_MATCH.value:
            row_issues.append("no_match")
        elif status == MatchStatus.NEEDS_VERIFICATION.value:
            row_issues.append("low_similarity")
        elif status.startswith(MatchStatus.ERROR.value):
            row_issues.append("lookup_error")

        issue_list.append("|".join(row_issues))

    result = df.copy()
    result["issues"] = issue_list
    return result
