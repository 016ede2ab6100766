"""Table verification engine."""

from .links import verify_links
from .pagination import choose_page_size, select_page_size
from .reconcile import Reconciliation, RowMismatch, reconcile_column
from .sorting import toggle_sort, verify_column_sorting
from .verifier import TableVerifier

__all__ = [
    "TableVerifier",
    "choose_page_size",
    "select_page_size",
    "reconcile_column",
    "Reconciliation",
    "RowMismatch",
    "toggle_sort",
    "verify_column_sorting",
    "verify_links",
]
