"""Text normalization utilities for compound names and formulas.

The name rules are tuned for KEGG COMPOUND naming and for names exported by
Compound Discoverer.  They are not suitable for other databases such as HMDB
or PubChem, which use different naming conventions.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, List

logger = logging.getLogger(__name__)

# Database annotations such as "[Similar to Androgen]"
BRACKET_PATTERN = re.compile(r"\[.*?\]")
# Stereochemical descriptors such as "(2S,3R)" with the preceding whitespace
PAREN_PATTERN = re.compile(r"\s*\(.*?\)")
# Export artifacts: "-123-..." at the start of the name or after whitespace
LEADING_NUMERIC_PATTERN = re.compile(r"(?:^|\s)-\d+[-A-Za-z]*")
# Export artifacts: "-12-" or a trailing "-12"
TRAILING_NUMERIC_PATTERN = re.compile(r"-\d+(-|$)")
# KEGG base-name abbreviation, left alone once already expanded
NORCHOL_PATTERN = re.compile(r"norchol(?!ane)")
MULTI_HYPHEN_PATTERN = re.compile(r"--+")


def standardize_formula(formula: str) -> str:
    """Return ``formula`` without spaces, e.g. ``" C6 H12 O6 "`` -> ``"C6H12O6"``."""

    return formula.replace(" ", "").strip()


def normalize_formula(formulas: Iterable[str]) -> List[str]:
    """Standardize a sequence of molecular formulas.

    Parameters
    ----------
    formulas:
        Molecular formula strings.

    Returns
    -------
    list of str
        Formulas with internal spaces removed and surrounding whitespace
        trimmed, in input order.
    """

    return [standardize_formula(f) for f in formulas]


def standardize_name(name: str) -> str:
    """Clean a single compound name for KEGG matching.

    The steps run in a fixed order:

    1. remove bracketed annotations (``"[Similar to ...]"``);
    2. remove parenthesized stereo descriptors (``"(2S,3R)"``);
    3. remove a leading numeric-dash export artifact;
    4. remove a trailing numeric-dash export artifact, keeping a following
       hyphen;
    5. expand the KEGG abbreviation ``"norchol"`` to ``"norcholane"``;
    6. trim surrounding whitespace;
    7. collapse repeated hyphens.

    Examples
    --------
    >>> standardize_name("D-Glucose (2S,3R)")
    'D-Glucose'
    """

    text = BRACKET_PATTERN.sub("", name)
    text = PAREN_PATTERN.sub("", text)
    text = LEADING_NUMERIC_PATTERN.sub("", text)
    text = TRAILING_NUMERIC_PATTERN.sub(r"\1", text)
    text = NORCHOL_PATTERN.sub("norcholane", text, count=1)
    text = text.strip()
    text = MULTI_HYPHEN_PATTERN.sub("-", text)
    if text != name:
        logger.debug("Standardized name %r -> %r", name, text)
    return text


def normalize_name(names: Iterable[str]) -> List[str]:
    """Standardize a sequence of compound names.

    See :func:`standardize_name` for the individual rules.  Order and length
    of the input are preserved.
    """

    return [standardize_name(n) for n in names]
