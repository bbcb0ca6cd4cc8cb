"""Tests for the chat completions generator and advise service."""

import json

import httpx
import pytest

from homepilot.errors import GenerationFailed, RecoveryFailed
from homepilot.generation import ChatCompletionsGenerator, TextGenerator, advise
from homepilot.models import GenerationParams


def _completion(content: str, finish_reason: str = "stop") -> dict:
    return {
        "id": "cmpl-1",
        "object": "chat.completion",
        "model": "deepseek-ai/DeepSeek-V3-0324",
        "choices": [
            {"index": 0, "message": {"role": "assistant", "content": content}, "finish_reason": finish_reason}
        ],
    }


class FakeGenerator(TextGenerator):
    def __init__(self, text: str) -> None:
        self.text = text
        self.prompts: list[tuple[str, str | None]] = []

    def generate(self, prompt: str, system_prompt: str | None = None) -> str:
        self.prompts.append((prompt, system_prompt))
        return self.text

    @property
    def source_name(self) -> str:
        return "fake"


class TestChatCompletionsGenerator:
    def test_posts_chat_request(self) -> None:
        seen: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers.get("Authorization")
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=_completion('{"affordabilityScore": 72}'))

        client = httpx.Client(transport=httpx.MockTransport(handler))
        gen = ChatCompletionsGenerator(GenerationParams(), api_key="test-key", client=client)
        text = gen.generate("Analyze 123 Main St", system_prompt="You are Sarah.")

        assert text == '{"affordabilityScore": 72}'
        assert seen["url"] == "https://api.featherless.ai/v1/chat/completions"
        assert seen["auth"] == "Bearer test-key"
        assert seen["body"]["model"] == "deepseek-ai/DeepSeek-V3-0324"
        assert seen["body"]["max_tokens"] == 2000
        assert seen["body"]["messages"] == [
            {"role": "system", "content": "You are Sarah."},
            {"role": "user", "content": "Analyze 123 Main St"},
        ]

    def test_api_key_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FEATHERLESS_API_KEY", "env-key")
        assert ChatCompletionsGenerator().api_key == "env-key"

    def test_missing_api_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("FEATHERLESS_API_KEY", raising=False)
        with pytest.raises(GenerationFailed, match="FEATHERLESS_API_KEY"):
            ChatCompletionsGenerator().generate("hi")

    def test_error_status(self) -> None:
        client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(429, json={"error": "rate"})))
        gen = ChatCompletionsGenerator(api_key="k", client=client)
        with pytest.raises(GenerationFailed) as exc:
            gen.generate("hi")
        assert exc.value.status_code == 429

    def test_unexpected_shape(self) -> None:
        client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200, json={"choices": []})))
        gen = ChatCompletionsGenerator(api_key="k", client=client)
        with pytest.raises(GenerationFailed):
            gen.generate("hi")

    def test_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        gen = ChatCompletionsGenerator(api_key="k", client=httpx.Client(transport=httpx.MockTransport(handler)))
        with pytest.raises(GenerationFailed):
            gen.generate("hi")


class TestAdvise:
    def test_truncated_output_recovered(self) -> None:
        gen = FakeGenerator('```json\n{"affordabilityScore": 64, "affordabilityLevel": "Stretch", "keyInsights": ["Hot')
        result = advise(gen, "prompt", system_prompt="system")
        assert result.score == 64
        assert result.level == "Stretch"
        assert result.insights == ("Hot",)
        assert result.repaired is True
        assert gen.prompts == [("prompt", "system")]

    def test_unrecoverable_output(self) -> None:
        with pytest.raises(RecoveryFailed):
            advise(FakeGenerator("Sorry, I can't help with that."), "prompt")

    def test_through_http_client(self) -> None:
        body = '{"investmentScore": 80, "advisorMessage": "Buy"}'
        client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200, json=_completion(body))))
        result = advise(ChatCompletionsGenerator(api_key="k", client=client), "prompt")
        assert result.score == 80
        assert result.advisor_message == "Buy"
        assert result.repaired is False
