"""Core formatting logic for nofmt."""

from nofmt.core.merger import check_topology, reconcile
from nofmt.core.transformer import FormatResult, SourceFormatter

__all__ = [
    "check_topology",
    "reconcile",
    "FormatResult",
    "SourceFormatter",
]
