"""Heuristic parsing of free-form model output.

Every function here is pure and never raises on odd input: the extraction
parser reports problems as a `Failure`, and the solution parsers fall back to
the named defaults below so callers and tests can rely on exact values.
"""

import json
import logging
import re

from snapsolve.core.types import Failure, ProblemInfo, Result, Success, SolutionResult
from snapsolve.exceptions import EmptyResponseError, MalformedJSONError, SnapSolveError

log = logging.getLogger(__name__)

DEFAULT_THOUGHT = "Solution approach based on efficiency and readability."

DEFAULT_TIME_COMPLEXITY = (
    "O(n) - Linear time complexity because the input is processed in a single "
    "pass. Each element is visited exactly once and every lookup is O(1)."
)

DEFAULT_SPACE_COMPLEXITY = (
    "O(n) - Linear space complexity because auxiliary storage grows with the "
    "input. In the worst case every element is stored once."
)

# Prefix used when a complexity statement carries no Big-O notation
ASSUMED_NOTATION = "O(n)"

THOUGHT_HEADERS = ("Thoughts:", "Key Insights:", "Reasoning:", "Approach:")

_RE_LEADING_FENCE = re.compile(r"\A\s*```(?:json)?", re.IGNORECASE)
_RE_TRAILING_FENCE = re.compile(r"```\s*\Z")
_RE_CODE_BLOCK = re.compile(r"```[\w+#.\-]*[ \t]*\n?(.*?)```", re.DOTALL)
_RE_THOUGHTS = re.compile(
    r"(?:" + "|".join(re.escape(h) for h in THOUGHT_HEADERS) + r")"
    r"(.*?)(?:Time complexity:|\Z)",
    re.IGNORECASE | re.DOTALL,
)
# A marker needs whitespace after it, so "**" left by bold headers is no bullet
_RE_BULLET = re.compile(r"^[ \t]*(?:[-*•]|\d+\.)[ \t]+(\S.*)$", re.MULTILINE)
# Time text ends at a "Space complexity:" header, inline or on its own line
_RE_TIME = re.compile(
    r"(?i:Time complexity):?[ \t]*(.+?)"
    r"(?=\s*\**\s*(?i:Space complexity)\s*\**\s*:"
    r"|\n\s*\**\s*(?i:Space complexity)|\Z)",
    re.DOTALL,
)
# Space text ends at the next line opening with a capital letter
_RE_SPACE = re.compile(
    r"(?i:Space complexity):?[ \t]*(.+?)(?=\n\s*[A-Z]|\Z)",
    re.DOTALL,
)
_RE_NOTATION = re.compile(r"O\([^)]+\)", re.IGNORECASE)


# --- Extraction output ---


def strip_code_fences(text: str) -> str:
    """Remove an enclosing ```json / ``` fence and surrounding whitespace.

    Backticks inside the payload, e.g. in a JSON string value, are kept.
    """
    text = _RE_LEADING_FENCE.sub("", text or "", count=1)
    return _RE_TRAILING_FENCE.sub("", text, count=1).strip()


def parse_problem_info(text: str | None) -> Result[ProblemInfo, SnapSolveError]:
    """Parse the extraction stage output into a `ProblemInfo`."""
    if not text or not text.strip():
        return Failure(EmptyResponseError())

    cleaned = strip_code_fences(text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        log.debug("Extraction output is not JSON: %s", e)
        return Failure(
            MalformedJSONError(f"Failed to parse response as JSON: {e}", raw_text=text)
        )

    if not isinstance(data, dict):
        return Failure(
            MalformedJSONError(
                f"Expected a JSON object, got {type(data).__name__}", raw_text=text
            )
        )
    return Success(ProblemInfo.from_mapping(data))


# --- Solution output ---


def extract_code(text: str) -> str:
    """First fenced code block, or the whole text when there is none."""
    match = _RE_CODE_BLOCK.search(text or "")
    if match:
        return match.group(1).strip()
    return (text or "").strip()


def extract_thoughts(text: str) -> tuple[str, ...]:
    """Bullet entries of the first insights section."""
    match = _RE_THOUGHTS.search(text or "")
    if not match:
        return (DEFAULT_THOUGHT,)

    section = match.group(1)
    bullets = _RE_BULLET.findall(section)
    if bullets:
        entries = [b.strip() for b in bullets]
    else:
        entries = [line.strip() for line in section.splitlines()]
    # Drop blanks and bare emphasis markers such as "**"
    entries = [e for e in entries if e.strip("*_")]
    return tuple(entries) if entries else (DEFAULT_THOUGHT,)


def normalize_complexity(statement: str) -> str:
    """Ensure a complexity statement reads ``<notation> - <explanation>``."""
    statement = statement.strip()
    notation = _RE_NOTATION.search(statement)
    if notation is None:
        return f"{ASSUMED_NOTATION} - {statement}"
    if "-" not in statement and "because" not in statement:
        rest = statement.replace(notation.group(0), "", 1).strip()
        return f"{notation.group(0)} - {rest}"
    return statement


def _capture(pattern: re.Pattern[str], text: str) -> str | None:
    match = pattern.search(text or "")
    if not match:
        return None
    # Markdown emphasis around the header, e.g. "**Time complexity:** O(n)"
    captured = match.group(1).strip().lstrip("*").strip()
    return captured or None


def extract_complexity(text: str) -> tuple[str, str]:
    """Return ``(time_complexity, space_complexity)``."""
    time_text = _capture(_RE_TIME, text)
    space_text = _capture(_RE_SPACE, text)
    return (
        normalize_complexity(time_text) if time_text else DEFAULT_TIME_COMPLEXITY,
        normalize_complexity(space_text) if space_text else DEFAULT_SPACE_COMPLEXITY,
    )


def parse_solution(text: str) -> SolutionResult:
    """Best-effort structured view of the solution stage output."""
    time_complexity, space_complexity = extract_complexity(text)
    return SolutionResult(
        code=extract_code(text),
        thoughts=extract_thoughts(text),
        time_complexity=time_complexity,
        space_complexity=space_complexity,
    )
