"""Shared fixtures: an in-memory stand-in for the Ollama daemon."""

from __future__ import annotations

from typing import Any, Optional

import pytest

from ollabench.ollama import GenerationError, PullError


def generate_payload(
    eval_count: int = 100,
    eval_duration: int = 2_000_000_000,
    load_duration: int = 50_000_000,
    prompt_eval_duration: int = 10_000_000,
    prompt_eval_count: int = 12,
    response: str = "ok",
) -> dict[str, Any]:
    return {
        "model": "m",
        "response": response,
        "done": True,
        "total_duration": load_duration + prompt_eval_duration + eval_duration,
        "load_duration": load_duration,
        "prompt_eval_count": prompt_eval_count,
        "prompt_eval_duration": prompt_eval_duration,
        "eval_count": eval_count,
        "eval_duration": eval_duration,
    }


class FakeClient:
    """Duck-typed OllamaClient used by executor and pipeline tests.

    ``replies`` maps a model name to a list consumed one per generate call;
    an Exception entry is raised instead of returned.
    """

    def __init__(
        self,
        installed: Optional[list[str]] = None,
        replies: Optional[dict[str, list[Any]]] = None,
        pull_error: Optional[str] = None,
        running: bool = True,
    ) -> None:
        self.running = running
        self.installed = list(installed or [])
        self.replies = {k: list(v) for k, v in (replies or {}).items()}
        self.pull_error = pull_error
        self.generate_calls: list[tuple[str, str]] = []
        self.pulled: list[str] = []
        self.base_url = "http://fake:11434"

    def __enter__(self) -> FakeClient:
        return self

    def __exit__(self, *exc: object) -> None:
        pass

    def is_running(self) -> bool:
        return self.running

    def installed_names(self) -> list[str]:
        return list(self.installed)

    def is_installed(self, model: str) -> bool:
        return model in self.installed

    def pull(self, model: str) -> None:
        self.pulled.append(model)
        if self.pull_error:
            raise PullError(self.pull_error)
        self.installed.append(model)

    def generate(self, model: str, prompt: str) -> dict[str, Any]:
        self.generate_calls.append((model, prompt))
        queue = self.replies.get(model)
        reply = queue.pop(0) if queue else generate_payload()
        if isinstance(reply, BaseException):
            raise reply
        return reply


@pytest.fixture
def make_client():
    """Factory for FakeClient instances."""
    return FakeClient


@pytest.fixture
def payload():
    """Factory for /api/generate response bodies."""
    return generate_payload


@pytest.fixture
def malformed() -> GenerationError:
    return GenerationError("failed to parse response: Expecting value: line 1 column 1 (char 0)")
