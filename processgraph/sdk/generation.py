"""Text-to-graph generation providers.

The layout core never calls a generator itself; these are the collaborators
that produce the ProcessDocument it consumes. Which one is used is decided by
an explicit GeneratorSettings object (see build_generator()).

    generator = build_generator(settings.generator)
    document = generator.generate("Receive order; Check stock; Ship")
    print(generator.last_diagnostics)
"""

from __future__ import annotations

import json
import logging
import re
import time
from typing import Callable, Protocol

import httpx
from pydantic import BaseModel
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from processgraph.config import GeneratorSettings
from processgraph.models.process_graph import (
    GraphModel,
    NodeKind,
    ProcessDocument,
    ProcessNode,
    SequenceFlow,
)
from processgraph.utils.identifiers import generate_request_id

logger = logging.getLogger(__name__)

SNIPPET_LENGTH = 300

SYSTEM_PROMPT = """You are a strict parser. Answer only with compact JSON in the following schema and no additional text.
{
  "process": {
    "id": "string",
    "name": "string",
    "nodes": [
      { "id": "string", "type": "start|task|exclusiveGateway|end", "name": "string?" }
    ],
    "flows": [ { "id": "string", "source": "nodeId", "target": "nodeId" } ]
  }
}"""

DEFAULT_STEPS = ["Start process", "Execute step", "Finish process"]


class GenerationError(Exception):
    """Exception raised when a process graph cannot be generated."""
    pass


class GenerationDiagnostics(BaseModel):
    """What happened during the last generation call."""

    provider: str
    url: str | None = None
    model: str | None = None
    ok: bool
    status: int | None = None
    duration_ms: int | None = None
    request_id: str | None = None
    error: str | None = None
    snippet: str | None = None
    attempts: int = 1


class ProcessGenerator(Protocol):
    """Protocol for text-to-graph generators."""

    last_diagnostics: GenerationDiagnostics | None

    def generate(self, prompt: str, errors: list[str] | None = None) -> ProcessDocument:
        """Turn a process description into a process document.

        `errors` are validation errors of a previous attempt that the
        generator should fix.
        """
        ...


def extract_steps(text: str) -> list[str]:
    """Split a free-text description into step names.

    Splits on newlines, periods, semicolons and arrows; drops empty pieces
    and consecutive duplicates (case-insensitive).
    """
    raw = [part.strip() for part in re.split(r"\n|\.|;|->", text)]
    steps: list[str] = []
    for step in raw:
        if not step:
            continue
        if steps and steps[-1].lower() == step.lower():
            continue
        steps.append(step)
    return steps or list(DEFAULT_STEPS)


class MockGenerator:
    """Deterministic offline generator: one task per step, in a straight line."""

    def __init__(self) -> None:
        self.last_diagnostics: GenerationDiagnostics | None = None

    def generate(self, prompt: str, errors: list[str] | None = None) -> ProcessDocument:
        started = time.perf_counter()
        steps = extract_steps(prompt or "Start; Step; End")

        start_id = "StartEvent_1"
        nodes = [ProcessNode(id=start_id, kind=NodeKind.start, label="Start")]
        flows: list[SequenceFlow] = []

        last_id = start_id
        for i, step in enumerate(steps):
            task_id = f"Activity_{i + 1}"
            nodes.append(ProcessNode(id=task_id, kind=NodeKind.task, label=step))
            flows.append(SequenceFlow(id=f"Flow_{i + 1}", source_id=last_id, target_id=task_id))
            last_id = task_id

        end_id = f"EndEvent_{len(steps) + 1}"
        nodes.append(ProcessNode(id=end_id, kind=NodeKind.end, label="End"))
        flows.append(SequenceFlow(id=f"Flow_{len(steps) + 1}", source_id=last_id, target_id=end_id))

        self.last_diagnostics = GenerationDiagnostics(
            provider="mock",
            ok=True,
            duration_ms=int((time.perf_counter() - started) * 1000),
            request_id=generate_request_id(),
        )
        return ProcessDocument(
            process=GraphModel(id="Process_1", name="Generated Process", nodes=nodes, flows=flows)
        )


def _extract_json_object(content: str) -> str:
    """Cut the outermost {...} out of a chat reply."""
    start = content.find("{")
    end = content.rfind("}")
    if start == -1 or end == -1 or end < start:
        raise GenerationError("invalid model reply (no JSON object)")
    return content[start:end + 1]


def _message_content(data: dict) -> str:
    """Text of the first choice of a chat-completions response."""
    choices = data.get("choices") or [{}]
    content = (choices[0].get("message") or {}).get("content")
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "\n".join(
            part.get("text", "") for part in content if isinstance(part, dict)
        )
    return json.dumps(content or {})


class HttpGenerator:
    """Generator backed by an HTTP service.

    provider "custom": POST {"prompt", "errors"} to api_url, the response body
    is the process document.
    provider "openrouter": chat-completions call with a strict-JSON system
    prompt; the JSON object is extracted from the reply text.

    Failed attempts are retried with exponential backoff (tenacity): the
    first retry waits backoff_seconds, each later one twice as long.
    """

    def __init__(
        self,
        settings: GeneratorSettings,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Args:
            settings: provider, endpoint, credentials and retry policy
            transport: optional httpx transport (tests use httpx.MockTransport)
            sleep: blocking sleep used between retries
        """
        if settings.use_mock:
            raise ValueError("HttpGenerator needs a non-mock provider")
        self.settings = settings
        self._transport = transport
        self._sleep = sleep
        self.last_diagnostics: GenerationDiagnostics | None = None

    def generate(self, prompt: str, errors: list[str] | None = None) -> ProcessDocument:
        settings = self.settings
        if not settings.api_url or not settings.api_key:
            self.last_diagnostics = GenerationDiagnostics(
                provider=settings.provider,
                url=settings.api_url,
                ok=False,
                error="generation backend is not configured",
            )
            raise GenerationError("generation backend is not configured (api_url/api_key)")

        retrying = Retrying(
            retry=retry_if_exception_type(GenerationError),
            stop=stop_after_attempt(settings.retries + 1),
            wait=wait_exponential(multiplier=settings.backoff_seconds),
            sleep=self._sleep,
            before_sleep=lambda retry_state: logger.warning(
                "generation attempt %d/%d failed: %s; retrying in %.2fs",
                retry_state.attempt_number,
                settings.retries + 1,
                retry_state.outcome.exception(),
                retry_state.next_action.sleep,
            ),
            reraise=True,
        )
        for attempt in retrying:
            with attempt:
                document = self._request_once(prompt, errors, attempt.retry_state.attempt_number)
        return document

    def _build_request(self, prompt: str, errors: list[str] | None) -> tuple[dict, dict]:
        settings = self.settings
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {settings.api_key}",
        }
        if settings.provider != "openrouter":
            return {"prompt": prompt, "errors": errors}, headers

        if settings.referer:
            headers["HTTP-Referer"] = settings.referer
        headers["X-Title"] = settings.title
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {
                "role": "user",
                "content": (
                    "Create the process structure as JSON based on this description. "
                    f"Use only the allowed node types. Description: {prompt}"
                ),
            },
        ]
        if errors:
            messages.append({
                "role": "user",
                "content": f"Known validation errors: {'; '.join(errors)}",
            })
        body = {
            "model": settings.model,
            "messages": messages,
            "temperature": 0,
            "response_format": {"type": "json_object"},
        }
        return body, headers

    def _parse(self, response: httpx.Response) -> ProcessDocument:
        data = response.json()
        if self.settings.provider == "openrouter":
            return ProcessDocument.model_validate_json(_extract_json_object(_message_content(data)))
        return ProcessDocument.model_validate(data)

    def _request_once(self, prompt: str, errors: list[str] | None, attempt: int) -> ProcessDocument:
        settings = self.settings
        body, headers = self._build_request(prompt, errors)
        model_name = settings.model if settings.provider == "openrouter" else None
        started = time.perf_counter()

        def diagnostics(**kwargs) -> GenerationDiagnostics:
            return GenerationDiagnostics(
                provider=settings.provider,
                url=settings.api_url,
                model=model_name,
                duration_ms=int((time.perf_counter() - started) * 1000),
                attempts=attempt,
                **kwargs,
            )

        try:
            with httpx.Client(timeout=settings.timeout, transport=self._transport) as client:
                response = client.post(settings.api_url, json=body, headers=headers)
        except httpx.HTTPError as exc:
            self.last_diagnostics = diagnostics(ok=False, error=str(exc))
            raise GenerationError(f"request to generation backend failed: {exc}") from exc

        request_id = response.headers.get("x-request-id") or generate_request_id()
        if response.status_code >= 400:
            self.last_diagnostics = diagnostics(
                ok=False,
                status=response.status_code,
                request_id=request_id,
                error=f"HTTP {response.status_code}",
                snippet=response.text[:SNIPPET_LENGTH],
            )
            raise GenerationError(f"generation backend returned HTTP {response.status_code}")

        try:
            document = self._parse(response)
        except (ValueError, GenerationError) as exc:
            self.last_diagnostics = diagnostics(
                ok=False,
                status=response.status_code,
                request_id=request_id,
                error=str(exc).splitlines()[0] if str(exc) else type(exc).__name__,
                snippet=response.text[:SNIPPET_LENGTH],
            )
            raise GenerationError(f"unusable reply from generation backend: {exc}") from exc

        self.last_diagnostics = diagnostics(
            ok=True,
            status=response.status_code,
            request_id=request_id,
        )
        return document


def build_generator(
    settings: GeneratorSettings,
    transport: httpx.BaseTransport | None = None,
) -> ProcessGenerator:
    """Pick the generator implementation for the given settings."""
    if settings.use_mock:
        return MockGenerator()
    return HttpGenerator(settings, transport=transport)
