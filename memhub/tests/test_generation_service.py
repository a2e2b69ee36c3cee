"""Tests for GenerationService and JSON repair."""

import pytest

from conftest import FakeProvider, RecordingFactory

from memhub.services.config_service import AIConfig
from memhub.services.exceptions import ConfigurationError, GenerationError
from memhub.services.generation_service import (
    JSON_SYSTEM_INSTRUCTION,
    RAW_JSON_SUFFIX,
    GenerationService,
    parse_json_text,
    strip_code_fences,
)


class TestJsonRepair:

    def test_fenced_json_parses_like_unfenced(self):
        body = '{"user_response": "hi", "related_memories": [{"id": "e1"}]}'
        assert parse_json_text(f"```json\n{body}\n```") == parse_json_text(body)

    def test_fence_without_language_tag(self):
        assert parse_json_text("```\n[1, 2, 3]\n```") == [1, 2, 3]

    def test_strip_code_fences_leaves_plain_text(self):
        assert strip_code_fences('  {"a": 1}  ') == '{"a": 1}'

    def test_json_embedded_in_prose(self):
        text = 'Here you go:\n```json\n{"a": 1}\n```\nHope this helps.'
        assert parse_json_text(text) == {"a": 1}

    def test_leading_commentary_without_fence(self):
        assert parse_json_text('Sure! {"connections": []} done') == {"connections": []}

    def test_invalid_json_carries_raw_text(self):
        with pytest.raises(GenerationError) as exc_info:
            parse_json_text("not json at all", provider="openai")
        assert exc_info.value.raw_text == "not json at all"
        assert exc_info.value.provider == "openai"

    def test_empty_completion_is_an_error(self):
        with pytest.raises(GenerationError):
            parse_json_text("   ")


class TestGenerateText:

    def test_returns_completion_with_resolved_model(self, ai_config):
        provider = FakeProvider(completion="hello")
        factory = RecordingFactory(provider)
        service = GenerationService(config=ai_config, client_factory=factory)

        assert service.generate_text("prompt", system_instruction="be brief") == "hello"
        assert factory.requested == ["gemini"]
        call = provider.complete_calls[0]
        assert call["model"] == "gemini-test"
        assert call["system_instruction"] == "be brief"
        assert call["json_mode"] is False

    def test_default_model_from_catalog(self):
        provider = FakeProvider(completion="ok")
        config = AIConfig(provider="openai", openai_key="k")
        service = GenerationService(config=config, client_factory=RecordingFactory(provider))

        service.generate_text("prompt")

        assert provider.complete_calls[0]["model"] == "gpt-4o-mini"

    def test_empty_completion_is_not_an_error(self, ai_config):
        service = GenerationService(config=ai_config, client_factory=RecordingFactory(FakeProvider(completion="")))
        assert service.generate_text("prompt") == ""

    def test_unexpected_exception_becomes_generation_error(self, ai_config):
        provider = FakeProvider(completion=RuntimeError("socket closed"))
        service = GenerationService(config=ai_config, client_factory=RecordingFactory(provider))

        with pytest.raises(GenerationError) as exc_info:
            service.generate_text("prompt")
        assert "socket closed" in str(exc_info.value)
        assert exc_info.value.provider == "gemini"

    def test_configuration_error_surfaces_unchanged(self, ai_config):
        def factory(name, config):
            raise ConfigurationError("Gemini API Key not configured")

        service = GenerationService(config=ai_config, client_factory=factory)
        with pytest.raises(ConfigurationError):
            service.generate_text("prompt")


class TestGenerateJson:

    def test_native_json_mode(self, ai_config):
        provider = FakeProvider(completion='{"ok": true}', native_json=True)
        service = GenerationService(config=ai_config, client_factory=RecordingFactory(provider))

        assert service.generate_json("give json") == {"ok": True}
        call = provider.complete_calls[0]
        assert call["json_mode"] is True
        assert call["prompt"] == "give json"
        assert call["system_instruction"] == JSON_SYSTEM_INSTRUCTION

    def test_prompted_json_mode_strips_fences(self, ai_config):
        provider = FakeProvider(completion='```json\n{"ok": true}\n```', native_json=False)
        service = GenerationService(config=ai_config, client_factory=RecordingFactory(provider))

        assert service.generate_json("give json") == {"ok": True}
        call = provider.complete_calls[0]
        assert call["json_mode"] is False
        assert call["prompt"].endswith(RAW_JSON_SUFFIX)
        assert call["system_instruction"] == JSON_SYSTEM_INSTRUCTION

    def test_parse_failure_raises_with_raw_text(self, ai_config):
        provider = FakeProvider(completion="I cannot answer that.")
        service = GenerationService(config=ai_config, client_factory=RecordingFactory(provider))

        with pytest.raises(GenerationError) as exc_info:
            service.generate_json("give json")
        assert exc_info.value.raw_text == "I cannot answer that."

    def test_result_reports_failure_instead_of_raising(self, ai_config):
        provider = FakeProvider(completion="nope")
        service = GenerationService(config=ai_config, client_factory=RecordingFactory(provider))

        result = service.generate_json_result("give json")

        assert result.ok is False
        assert result.raw_text == "nope"
        assert result.error

    def test_result_success(self, ai_config):
        provider = FakeProvider(completion="[1, 2]")
        service = GenerationService(config=ai_config, client_factory=RecordingFactory(provider))

        result = service.generate_json_result("give json")

        assert result.ok is True
        assert result.value == [1, 2]
