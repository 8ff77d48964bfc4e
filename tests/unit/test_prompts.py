"""Prompt construction for both stages."""

import pytest

from snapsolve.core.types import ProblemInfo
from snapsolve.prompts import (
    EXTRACTION_SYSTEM_PROMPT,
    NOT_PROVIDED,
    build_extraction_prompt,
    build_solution_prompt,
)

pytestmark = pytest.mark.unit


def test_extraction_prompt_names_all_fields_and_language():
    prompt = build_extraction_prompt("kotlin")

    for field in ("problem_statement", "constraints", "example_input", "example_output"):
        assert field in EXTRACTION_SYSTEM_PROMPT
    assert "kotlin" in prompt.user


def test_solution_prompt_embeds_problem():
    problem = ProblemInfo(
        problem_statement="Find the median",
        constraints="n <= 10^5",
        example_input="[1, 3, 2]",
        example_output="2",
    )

    prompt = build_solution_prompt(problem, "go")

    assert "Find the median" in prompt.user
    assert "n <= 10^5" in prompt.user
    assert "[1, 3, 2]" in prompt.user
    assert "LANGUAGE: go" in prompt.user
    assert NOT_PROVIDED not in prompt.user


def test_solution_prompt_marks_missing_fields():
    prompt = build_solution_prompt(ProblemInfo("Only statement", constraints="  "), "python")

    assert prompt.user.count(NOT_PROVIDED) == 3

