"""Result types for KEGG compound matching."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

# Columns appended to the input table by the batch matcher
RESULT_COLUMNS = ["KEGG_ID", "KEGG_Name", "Similarity", "Status"]


class MatchStatus(str, Enum):
    """Classification of a single match attempt."""

    AUTO_ACCEPTED = "Auto-accepted"
    NEEDS_VERIFICATION = "Needs verification"
    NO_MATCH = "No match"
    ERROR = "Error"


@dataclass(frozen=True)
class MatchResult:
    """Outcome of matching one name/formula pair against KEGG.

    ``similarity`` is only set for :attr:`MatchStatus.AUTO_ACCEPTED` and
    :attr:`MatchStatus.NEEDS_VERIFICATION`; ``message`` only for
    :attr:`MatchStatus.ERROR`.  Use the constructors below rather than
    building instances directly.
    """

    status: MatchStatus
    kegg_id: Optional[str] = None
    kegg_name: Optional[str] = None
    similarity: Optional[float] = None
    message: Optional[str] = None

    @classmethod
    def from_best(
        cls, kegg_id: str, kegg_name: str, similarity: float, threshold: float
    ) -> "MatchResult":
        """Classify the best candidate against ``threshold``."""

        status = (
            MatchStatus.AUTO_ACCEPTED
            if similarity >= threshold
            else MatchStatus.NEEDS_VERIFICATION
        )
        return cls(status, kegg_id=kegg_id, kegg_name=kegg_name, similarity=similarity)

    @classmethod
    def no_match(cls) -> "MatchResult":
        return cls(MatchStatus.NO_MATCH)

    @classmethod
    def error(cls, message: str) -> "MatchResult":
        return cls(MatchStatus.ERROR, message=message)

    @property
    def status_label(self) -> str:
        """Status as written to tables, e.g. ``"Error: timed out"``."""

        if self.status is MatchStatus.ERROR:
            return f"{self.status.value}: {self.message}"
        return self.status.value

    def as_row(self) -> Dict[str, object]:
        return {
            "KEGG_ID": self.kegg_id,
            "KEGG_Name": self.kegg_name,
            "Similarity": self.similarity,
            "Status": self.status_label,
        }
