"""Map metabolite names and formulas to KEGG compound identifiers."""

from .io_utils import read_input_csv, write_output_csv
from .kegg import KeggClient, KeggRecord
from .matching import match_batch, match_compound, summarize_status
from .models import MatchResult, MatchStatus
from .similarity import calculate_name_similarity
from .transforms import normalize_formula, normalize_name, standardize_formula, standardize_name
from .validate import check_issues, validate_input, validate_new_columns

__all__ = [
    "read_input_csv",
    "write_output_csv",
    "KeggClient",
    "KeggRecord",
    "match_compound",
    "match_batch",
    "summarize_status",
    "MatchResult",
    "MatchStatus",
    "calculate_name_similarity",
    "normalize_formula",
    "normalize_name",
    "standardize_formula",
    "standardize_name",
    "check_issues",
    "validate_input",
    "validate_new_columns",
]
