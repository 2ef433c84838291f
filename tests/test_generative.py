import asyncio

import pytest
from pydantic import BaseModel

from auto_site_designer.errors import GenerationTimeout, ProviderError, SchemaMismatch
from auto_site_designer.generative import RequestKind, StructuredPrompt, generate_with_retry


class Reply(BaseModel):
    description: str


class SequenceService:
    """Returns (or raises) the scripted outcomes in order."""

    def __init__(self, *outcomes):
        self._outcomes = list(outcomes)
        self.prompts = []

    async def generate(self, kind, prompt):
        self.prompts.append(prompt)
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, float):
            await asyncio.sleep(outcome)
            return {"description": "late"}
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def prompt_for(attempt):
    return StructuredPrompt(
        kind=RequestKind.footer,
        system="system",
        instructions=["Describe the business."],
        payload={"attempt": attempt},
        strict=attempt > 1,
    )


def run(service, max_attempts=2, timeout=1.0):
    return asyncio.run(
        generate_with_retry(
            service,
            RequestKind.footer,
            prompt_for,
            validate=Reply.model_validate,
            timeout=timeout,
            max_attempts=max_attempts,
        )
    )


def test_first_valid_response_wins():
    service = SequenceService({"description": "Good coffee."})

    result = run(service)

    assert result.ok
    assert result.value == Reply(description="Good coffee.")
    assert result.attempts == 1


def test_invalid_response_is_retried_with_stricter_prompt():
    service = SequenceService({"unexpected": True}, {"description": "Second try."})

    result = run(service)

    assert result.value.description == "Second try."
    assert result.attempts == 2
    assert [prompt.strict for prompt in service.prompts] == [False, True]


def test_exhausted_attempts_report_last_error():
    service = SequenceService({"unexpected": True}, ProviderError("quota exceeded"))

    result = run(service)

    assert not result.ok
    assert isinstance(result.error, ProviderError)
    assert result.attempts == 2


def test_validation_failure_becomes_schema_mismatch():
    result = run(SequenceService({"description": 42}), max_attempts=1)

    assert isinstance(result.error, SchemaMismatch)


def test_slow_service_times_out():
    result = run(SequenceService(0.5, 0.5), timeout=0.01)

    assert isinstance(result.error, GenerationTimeout)
    assert result.attempts == 2


def test_cancellation_is_not_absorbed():
    async def scenario():
        task = asyncio.create_task(
            generate_with_retry(
                SequenceService(5.0),
                RequestKind.footer,
                prompt_for,
                validate=Reply.model_validate,
                timeout=10.0,
                max_attempts=3,
            )
        )
        await asyncio.sleep(0.01)
        task.cancel()
        await task

    with pytest.raises(asyncio.CancelledError):
        asyncio.run(scenario())


def test_render_includes_schema_and_payload():
    prompt = StructuredPrompt(
        kind=RequestKind.nav,
        system="You configure navigation.",
        instructions=["Keep it short."],
        payload={"business_name": "Bean & Bloom"},
        response_schema={"type": "object"},
    )

    text = prompt.render()

    assert text.startswith("You configure navigation.")
    assert "- Keep it short." in text
    assert '"business_name": "Bean & Bloom"' in text
    assert 'Response JSON schema:\n{"type": "object"}' in text
