"""Tests for HTTP-based adapters."""

import asyncio
import json

import pytest

from foodlens.adapters.openai_vision_client import OpenAIVisionClient


class _FakeResponses:
    def __init__(self, output_text: str) -> None:
        self.output_text = output_text
        self.last_payload: dict[str, object] | None = None

    async def create(self, **kwargs):  # type: ignore[no-untyped-def]
        self.last_payload = kwargs
        return type("Resp", (), {"output_text": self.output_text})()


class _FakeOpenAI:
    def __init__(self, output_text: str = json.dumps({"items": []})) -> None:
        self.responses = _FakeResponses(output_text)
        self.closed = False

    async def close(self) -> None:
        self.closed = True


def test_openai_vision_client_sends_image_and_parses_output() -> None:
    fake = _FakeOpenAI()
    client = OpenAIVisionClient(client=fake)

    result = asyncio.run(
        client.extract(
            model="gpt-5.2",
            reasoning_effort="low",
            store=False,
            image_data_url="data:image/jpeg;base64,ZmFrZQ==",
            schema={"type": "object"},
            prompt="Identify the dish",
        )
    )

    assert result == {"items": []}
    payload = fake.responses.last_payload
    assert payload is not None
    assert payload["reasoning"] == {"effort": "low"}
    content = payload["input"][0]["content"]
    assert content[1] == {
        "type": "input_image",
        "image_url": "data:image/jpeg;base64,ZmFrZQ==",
    }


def test_openai_vision_client_text_only() -> None:
    fake = _FakeOpenAI()
    client = OpenAIVisionClient(client=fake)

    asyncio.run(
        client.extract(
            model="gpt-5.2",
            reasoning_effort=None,
            store=False,
            schema={"type": "object"},
            prompt="Identify: dosa",
        )
    )

    payload = fake.responses.last_payload
    assert payload is not None
    assert "reasoning" not in payload
    assert len(payload["input"][0]["content"]) == 1


def test_openai_vision_client_rejects_empty_output() -> None:
    client = OpenAIVisionClient(client=_FakeOpenAI(output_text=""))

    with pytest.raises(RuntimeError):
        asyncio.run(
            client.extract(
                model="gpt-5.2",
                reasoning_effort="low",
                store=False,
                schema={"type": "object"},
                prompt="Identify the dish",
            )
        )


def test_openai_vision_client_close() -> None:
    fake = _FakeOpenAI()

    asyncio.run(OpenAIVisionClient(client=fake).close())

    assert fake.closed is True
