"""Input/output helpers for KEGG compound matching.

This module provides convenience wrappers around pandas CSV readers and
writers with additional validation.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable

import pandas as pd

from .validate import validate_input

logger = logging.getLogger(__name__)


def read_input_csv(
    path: str | Path,
    *,
    sep: str = ",",
    encoding: str = "utf-8",
    required: Iterable[str] | None = None,
) -> pd.DataFrame:
    """Load input CSV and validate required columns.

    All columns are read as strings and empty cells become ``""``; compound
    names such as ``"NA"`` or ``"None"`` are kept verbatim.

    Parameters
    ----------
    path:
        Path to the input CSV file.
    sep:
        Field separator used in the CSV.
    encoding:
        Encoding of the CSV file.
    required:
        Required column names, see :func:`~keggmatch.validate.validate_input`.

    Returns
    -------
    pandas.DataFrame
        DataFrame containing at least the required columns.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ValueError
        If required columns are missing.
    """

    path = Path(path)
    logger.debug("Reading input CSV from %s", path)
    df = pd.read_csv(path, sep=sep, encoding=encoding, dtype=str, keep_default_na=False)
    validate_input(df, required)
    logger.debug("Loaded %d rows with columns %s", len(df), list(df.columns))
    return df


def write_output_csv(
    df: pd.DataFrame,
    path: str | Path,
    *,
    sep: str = ",",
    encoding: str = "utf-8",
    index: bool = False,
    **to_csv_kwargs: Any,
) -> None:
    """Write matched compounds to CSV.

    Missing KEGG IDs, names and similarities are written as empty cells, so
    the file reads back cleanly through :func:`read_input_csv`.

    Parameters
    ----------
    df:
        Matched table, usually the output of
        :func:`~keggmatch.matching.match_batch`.
    path:
        Destination file path.
    sep:
        Field separator; use the one of the input file to keep exports
        interchangeable.
    encoding:
        Text encoding for the output file.
    index:
        Whether to write the row index.
    to_csv_kwargs:
        Extra options for :meth:`pandas.DataFrame.to_csv`.
    """

    path = Path(path)
    logger.debug("Writing %d matched rows to %s", len(df), path)
    df.to_csv(path, sep=sep, encoding=encoding, index=index, **to_csv_kwargs)
