"""Prompt construction for the extraction and solution stages."""

from dataclasses import dataclass

from snapsolve.core.types import ProblemInfo

NOT_PROVIDED = "Not provided."

EXTRACTION_SYSTEM_PROMPT = (
    "You are a coding challenge interpreter. Analyze the screenshots of a coding "
    "problem and extract all relevant information. Return a single JSON object "
    "with exactly these fields: problem_statement, constraints, example_input, "
    "example_output. Use null for any field you cannot find. Return only the "
    "JSON object, with no explanation or Markdown around it."
)

SOLUTION_SYSTEM_PROMPT = (
    "You are an expert coding interview assistant. Provide clear, optimal "
    "solutions with detailed explanations."
)

_SOLUTION_TEMPLATE = """\
Generate a detailed solution for the following coding problem:

PROBLEM STATEMENT:
{problem_statement}

CONSTRAINTS:
{constraints}

EXAMPLE INPUT:
{example_input}

EXAMPLE OUTPUT:
{example_output}

LANGUAGE: {language}

Format the response as follows:
1. Code: a clean, optimized implementation in {language} inside a fenced code block
2. Your Thoughts: a bulleted list of the key insights and reasoning behind the approach
3. Time complexity: O(X) followed by a detailed explanation of at least 2 sentences
4. Space complexity: O(X) followed by a detailed explanation of at least 2 sentences

For example: "Time complexity: O(n) because we iterate through the array only \
once. This is optimal because every element has to be examined at least once."

The solution should be efficient, well-commented and handle edge cases.
"""


@dataclass(frozen=True, slots=True)
class Prompt:
    """A system instruction plus the user turn text."""

    system: str
    user: str


def build_extraction_prompt(language: str) -> Prompt:
    return Prompt(
        system=EXTRACTION_SYSTEM_PROMPT,
        user=(
            "Extract the coding problem details from these screenshots. "
            f"Return them in JSON format. The preferred language for the "
            f"solution is {language}."
        ),
    )


def build_solution_prompt(problem: ProblemInfo, language: str) -> Prompt:
    """Embed the problem fields, substituting a placeholder for absent ones."""

    def _field(value: str | None) -> str:
        return value.strip() if value and value.strip() else NOT_PROVIDED

    return Prompt(
        system=SOLUTION_SYSTEM_PROMPT,
        user=_SOLUTION_TEMPLATE.format(
            problem_statement=_field(problem.problem_statement),
            constraints=_field(problem.constraints),
            example_input=_field(problem.example_input),
            example_output=_field(problem.example_output),
            language=language,
        ),
    )
