"""Ollama daemon client — the HTTP boundary the benchmark core depends on.

Only three endpoints are used::

    GET  /api/tags      -> {"models": [{"name", "modified_at", "size"}, ...]}
    POST /api/pull      -> newline-delimited JSON status objects
    POST /api/generate  -> {"response", "done", "total_duration", "load_duration",
                            "prompt_eval_count", "prompt_eval_duration",
                            "eval_count", "eval_duration"}   (durations in ns)

Transport and decoding failures are translated into :class:`OllamaError`
subclasses here so callers never handle ``httpx`` or ``json`` exceptions.
No request is ever retried.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from .config import DEFAULT_OLLAMA_URL, DEFAULT_PULL_TIMEOUT_S, DEFAULT_REQUEST_TIMEOUT_S

logger = logging.getLogger(__name__)

# Liveness and listing calls should answer quickly even while a model loads.
_TAGS_TIMEOUT_S = 10.0


class OllamaError(RuntimeError):
    """Base class for daemon interaction failures."""


class DaemonUnavailableError(OllamaError):
    """The daemon could not be reached or did not answer ``/api/tags``."""


class PullError(OllamaError):
    """A model pull failed."""


class GenerationError(OllamaError):
    """A single generation request failed."""


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InstalledModel:
    """A model reported by ``GET /api/tags``."""

    name: str
    size: int = 0  # bytes
    modified_at: str = ""

    @property
    def size_display(self) -> str:
        gb = self.size / (1024**3)
        if gb >= 1.0:
            return f"{gb:.1f} GB"
        mb = self.size / (1024**2)
        return f"{mb:.0f} MB"


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class OllamaClient:
    """Synchronous client for a local Ollama daemon.

    Parameters
    ----------
    base_url:
        Daemon root URL, e.g. ``http://localhost:11434``.
    request_timeout:
        Seconds to wait for a single ``/api/generate`` call. Generous by
        default because the first call to a model includes loading it.
    pull_timeout:
        Read timeout for the streamed ``/api/pull`` response.
    transport:
        Optional ``httpx`` transport, used by tests to stand in for the daemon.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_OLLAMA_URL,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT_S,
        pull_timeout: float = DEFAULT_PULL_TIMEOUT_S,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.request_timeout = request_timeout
        self.pull_timeout = pull_timeout
        self._client = httpx.Client(base_url=self.base_url, transport=transport)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> OllamaClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    # -- liveness / listing -------------------------------------------------

    def is_running(self) -> bool:
        """Return True if ``/api/tags`` answers with HTTP 200."""
        try:
            resp = self._client.get("/api/tags", timeout=_TAGS_TIMEOUT_S)
        except httpx.HTTPError as exc:
            logger.debug("Ollama liveness check failed: %s", exc)
            return False
        return resp.status_code == 200

    def list_models(self) -> list[InstalledModel]:
        """Return the models installed on the daemon.

        Raises
        ------
        DaemonUnavailableError
            On transport errors, non-200 responses or an undecodable body.
        """
        try:
            resp = self._client.get("/api/tags", timeout=_TAGS_TIMEOUT_S)
            resp.raise_for_status()
            payload = resp.json()
        except httpx.HTTPStatusError as exc:
            raise DaemonUnavailableError(
                f"{self.base_url}/api/tags returned HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise DaemonUnavailableError(
                f"cannot reach Ollama at {self.base_url}: {exc}"
            ) from exc
        except ValueError as exc:
            raise DaemonUnavailableError(
                f"cannot decode model list from {self.base_url}: {exc}"
            ) from exc

        entries = payload.get("models") if isinstance(payload, dict) else None
        models: list[InstalledModel] = []
        for entry in entries or []:
            if not isinstance(entry, dict) or not entry.get("name"):
                continue
            models.append(
                InstalledModel(
                    name=str(entry["name"]),
                    size=_as_size(entry.get("size")),
                    modified_at=str(entry.get("modified_at") or ""),
                )
            )
        return models

    def installed_names(self) -> list[str]:
        return [m.name for m in self.list_models()]

    def is_installed(self, model: str) -> bool:
        """Exact-name installation check (no prefix matching)."""
        return model in self.installed_names()

    # -- pull -----------------------------------------------------------------

    def pull(self, model: str) -> None:
        """Install ``model`` through ``POST /api/pull``.

        The response is consumed as a sequence of JSON status objects. A status
        containing ``"success"`` or a clean end of stream means success.

        Raises
        ------
        PullError
            On transport errors, HTTP error statuses, undecodable lines, or a
            status object carrying an ``error`` field.
        """
        timeout = httpx.Timeout(10.0, read=self.pull_timeout)
        logger.info("Pulling %s from %s", model, self.base_url)
        try:
            with self._client.stream(
                "POST", "/api/pull", json={"name": model}, timeout=timeout
            ) as resp:
                if resp.status_code >= 400:
                    resp.read()
                    raise PullError(
                        f"HTTP {resp.status_code}: {_error_text(resp)}"
                    )
                for line in resp.iter_lines():
                    if not line.strip():
                        continue
                    try:
                        status = json.loads(line)
                    except json.JSONDecodeError as exc:
                        raise PullError(f"undecodable pull status: {exc}") from exc
                    if not isinstance(status, dict):
                        continue
                    if status.get("error"):
                        raise PullError(str(status["error"]))
                    text = status.get("status")
                    if isinstance(text, str):
                        logger.debug("pull %s: %s", model, text)
                        if "success" in text:
                            return
        except httpx.HTTPError as exc:
            raise PullError(str(exc) or type(exc).__name__) from exc
        logger.debug("pull %s: stream ended without explicit success", model)

    # -- generate -------------------------------------------------------------

    def generate(self, model: str, prompt: str) -> dict[str, Any]:
        """Run one non-streaming ``POST /api/generate`` and return its JSON body.

        Raises
        ------
        GenerationError
            On timeout, transport errors, HTTP error statuses, an undecodable
            or non-object body, or an ``error`` field in the body.
        """
        try:
            resp = self._client.post(
                "/api/generate",
                json={"model": model, "prompt": prompt, "stream": False},
                timeout=self.request_timeout,
            )
        except httpx.TimeoutException as exc:
            raise GenerationError(
                f"request timed out after {self.request_timeout:.0f}s"
            ) from exc
        except httpx.HTTPError as exc:
            raise GenerationError(f"failed to send request: {exc}") from exc

        if resp.status_code >= 400:
            raise GenerationError(f"HTTP {resp.status_code}: {_error_text(resp)}")

        try:
            data = resp.json()
        except ValueError as exc:
            raise GenerationError(f"failed to parse response: {exc}") from exc
        if not isinstance(data, dict):
            raise GenerationError(
                f"unexpected response payload of type {type(data).__name__}"
            )
        if data.get("error"):
            raise GenerationError(str(data["error"]))
        return data


def _as_size(value: Any) -> int:
    """Byte size from a listing entry; 0 when missing or not a number."""
    if isinstance(value, bool):
        return 0
    try:
        return max(int(value or 0), 0)
    except (TypeError, ValueError, OverflowError):
        return 0


def _error_text(resp: httpx.Response) -> str:
    """Best-effort error message from an Ollama error response."""
    try:
        body = resp.json()
    except ValueError:
        return resp.text.strip()[:200] or resp.reason_phrase
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return resp.reason_phrase
