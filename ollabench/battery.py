"""The fixed prompt battery run against every admitted model."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TestCase:
    """One prompt in the battery."""

    __test__ = False  # not a pytest class

    name: str
    category: str
    prompt: str


DEFAULT_BATTERY: tuple[TestCase, ...] = (
    TestCase(
        name="Simple Reasoning",
        category="reasoning",
        prompt="Explain the concept of recursion in programming in one paragraph.",
    ),
    TestCase(
        name="Code Generation",
        category="coding",
        prompt="Write a Python function to calculate the factorial of a number using recursion.",
    ),
    TestCase(
        name="Mathematical Problem",
        category="math",
        prompt="If a train travels at 60 mph for 2.5 hours, how far does it travel? Show your work.",
    ),
    TestCase(
        name="Creative Writing",
        category="creative",
        prompt="Write a short haiku about artificial intelligence.",
    ),
    TestCase(
        name="Question Answering",
        category="qa",
        prompt="What is the capital of France and what is it famous for?",
    ),
)
