"""Parsing of raw model responses into structured results."""

from .parser import (
    DEFAULT_SPACE_COMPLEXITY,
    DEFAULT_THOUGHT,
    DEFAULT_TIME_COMPLEXITY,
    extract_code,
    extract_complexity,
    extract_thoughts,
    normalize_complexity,
    parse_problem_info,
    parse_solution,
    strip_code_fences,
)

__all__ = [  # noqa: RUF022
    "parse_problem_info",
    "parse_solution",
    "strip_code_fences",
    "extract_code",
    "extract_thoughts",
    "extract_complexity",
    "normalize_complexity",
    "DEFAULT_THOUGHT",
    "DEFAULT_TIME_COMPLEXITY",
    "DEFAULT_SPACE_COMPLEXITY",
]
