"""Blaze Solid package: Solid Number arithmetic engine, infinity algebra and the GGGX oracle."""

__all__ = [
    "config",
    "types",
    "pool",
    "bigint",
    "exact",
    "propagation",
    "arithmetic",
    "undefined",
    "infinity",
    "patterns",
    "terminals",
    "trace",
    "gggx",
    "parser",
    "api",
    "cli",
    "logging_config",
]

# Public API exports

__api_exports__ = [
    "calculate",
    "calculate_expression",
    "square_root",
    "recover_value",
    "analyze_value",
    "to_result",
]
