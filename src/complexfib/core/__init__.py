"""Core numerics: the complex codec and the closed-form evaluator."""

from .codec import (
    DEFAULT_KEY_PREFIX,
    NEGATIVE_ZERO,
    cache_key,
    format_display,
    format_fixed,
    format_for_cache,
    is_negative_zero,
    parse_from_cache,
    parse_input,
)
from .evaluator import INV_SQRT_5, LOG_PHI, LOG_PSI, evaluate, is_finite

__all__ = [
    # Codec
    "DEFAULT_KEY_PREFIX", "NEGATIVE_ZERO", "cache_key", "format_display", "format_fixed", "format_for_cache",
    "is_negative_zero", "parse_from_cache", "parse_input",
    # Evaluator
    "INV_SQRT_5", "LOG_PHI", "LOG_PSI", "evaluate", "is_finite",
]
