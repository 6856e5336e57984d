"""Service-layer helpers for the NaijaTax backend."""

from .calculation_service import calculate_tax, evaluate
from .request_parser import parse_calculation_payload

__all__ = [
    "calculate_tax",
    "evaluate",
    "parse_calculation_payload",
]
