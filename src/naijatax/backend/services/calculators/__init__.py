"""Domain-specific calculation helpers."""

from .comparison import calculate_regime, compare_results
from .normalizer import annualise, clamp_rate_percent, parse_amount
from .progressive import allocate_progressive_tax, calculate_progressive_tax
from .reliefs import compute_reliefs
from .utils import format_currency, format_percentage, round_currency, round_rate

__all__ = [
    "allocate_progressive_tax",
    "annualise",
    "calculate_progressive_tax",
    "calculate_regime",
    "clamp_rate_percent",
    "compare_results",
    "compute_reliefs",
    "format_currency",
    "format_percentage",
    "parse_amount",
    "round_currency",
    "round_rate",
]
