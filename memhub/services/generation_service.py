# memhub/services/generation_service.py
"""
Provider-agnostic text and JSON generation.

Callers get a string, a parsed JSON value, or a typed error - never a
provider-specific exception.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Optional

from memhub.services.config_service import AIConfig, load_ai_config
from memhub.services.exceptions import ConfigurationError, GenerationError
from memhub.services.llm_providers import LLMProvider, create_client, resolve_chat_model

logger = logging.getLogger(__name__)

JSON_SYSTEM_INSTRUCTION = "You are a strict JSON generator. Output only valid JSON."
RAW_JSON_SUFFIX = (
    "\n\nReturn ONLY the raw JSON value. Do not wrap it in Markdown code fences "
    "and do not add any commentary before or after it."
)

# ```json ... ``` / ``` ... ``` wrappers, with an optional language tag
_FENCE_OPEN = re.compile(r"^\s*```[A-Za-z0-9_-]*[ \t]*\n?")
_FENCE_CLOSE = re.compile(r"\n?[ \t]*```\s*$")
_FENCED_BLOCK = re.compile(r"```(?:json)?\s*([\[{].*?[\]}])\s*```", re.DOTALL | re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    """Remove a surrounding Markdown code fence (and its language tag) from *text*."""
    cleaned = text.strip()
    cleaned = _FENCE_OPEN.sub("", cleaned, count=1)
    cleaned = _FENCE_CLOSE.sub("", cleaned, count=1)
    return cleaned.strip()


def parse_json_text(text: str, provider: Optional[str] = None) -> Any:
    """Parse a completion as JSON.

    1. strip a surrounding code fence and parse the rest;
    2. otherwise parse the first fenced block found anywhere in the text;
    3. otherwise decode the first JSON value starting at the first { or [.

    Raises:
        GenerationError: with the raw text attached when no JSON can be recovered
    """
    cleaned = strip_code_fences(text or "")
    if not cleaned:
        raise GenerationError("Empty completion where JSON was expected", provider=provider, raw_text=text)

    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        first_error = e

    fenced = _FENCED_BLOCK.search(cleaned)
    if fenced:
        try:
            return json.loads(fenced.group(1))
        except json.JSONDecodeError:
            pass

    starts = [i for i in (cleaned.find("{"), cleaned.find("[")) if i != -1]
    if starts:
        try:
            value, _ = json.JSONDecoder().raw_decode(cleaned[min(starts):])
            return value
        except json.JSONDecodeError:
            pass

    raise GenerationError(
        f"Invalid JSON in completion: {first_error.msg}", provider=provider, raw_text=text
    ) from first_error


@dataclass
class JSONResult:
    """Outcome of a JSON generation that callers inspect instead of catching."""
    ok: bool
    value: Any = None
    raw_text: Optional[str] = None
    error: Optional[str] = None


class GenerationService:
    """
    Uniform generate_text / generate_json over every configured provider.

    Args:
        config: Fixed AIConfig; when None a fresh snapshot is read from the
            settings store on every call.
        client_factory: Builds provider clients (create_client by default).
    """

    def __init__(
        self,
        config: Optional[AIConfig] = None,
        client_factory: Callable[[str, AIConfig], LLMProvider] = create_client,
    ):
        self._config = config
        self._client_factory = client_factory

    def _resolve(self):
        config = self._config or load_ai_config()
        client = self._client_factory(config.provider, config)
        model = resolve_chat_model(config.provider, config.model)
        return config.provider, model, client

    def generate_text(self, prompt: str, system_instruction: Optional[str] = None) -> str:
        """
        Single-turn completion.

        Returns:
            The first text segment of the response ("" when there is none)

        Raises:
            ConfigurationError: provider not configured
            GenerationError: provider call failed
        """
        provider, model, client = self._resolve()
        try:
            return client.complete(model, prompt, system_instruction=system_instruction)
        except (ConfigurationError, GenerationError) as e:
            logger.error(f"AI Generation Error ({provider}): {e}")
            raise
        except Exception as e:
            logger.error(f"AI Generation Error ({provider}): {e}")
            raise GenerationError(f"AI Error: {e}", provider=provider) from e

    def generate_json(self, prompt: str) -> Any:
        """
        Completion parsed as JSON.

        Uses the provider's native JSON mode when it has one; otherwise the
        prompt asks for raw JSON and code fences are stripped before parsing.

        Raises:
            ConfigurationError: provider not configured
            GenerationError: provider call failed or output is not valid JSON
                (raw text attached)
        """
        provider, model, client = self._resolve()
        native = client.supports_native_json
        full_prompt = prompt if native else f"{prompt}{RAW_JSON_SUFFIX}"

        try:
            text = client.complete(
                model,
                full_prompt,
                system_instruction=JSON_SYSTEM_INSTRUCTION,
                json_mode=native,
            )
        except (ConfigurationError, GenerationError) as e:
            logger.error(f"AI JSON Error ({provider}): {e}")
            raise
        except Exception as e:
            logger.error(f"AI JSON Error ({provider}): {e}")
            raise GenerationError(f"AI JSON Error: {e}", provider=provider) from e

        try:
            return parse_json_text(text, provider=provider)
        except GenerationError as e:
            logger.error(f"AI JSON Error ({provider}): {e}; raw={str(text)[:200]!r}")
            raise

    def generate_json_result(self, prompt: str) -> JSONResult:
        """generate_json with failures reported in the result instead of raised."""
        try:
            return JSONResult(ok=True, value=self.generate_json(prompt))
        except GenerationError as e:
            return JSONResult(ok=False, raw_text=e.raw_text, error=str(e))
        except ConfigurationError as e:
            return JSONResult(ok=False, error=str(e))


# Singleton instance
_generation_service: Optional[GenerationService] = None


def get_generation_service() -> GenerationService:
    """Get or create the singleton generation service."""
    global _generation_service
    if _generation_service is None:
        _generation_service = GenerationService()
    return _generation_service


def generate_text(prompt: str, system_instruction: Optional[str] = None) -> str:
    return get_generation_service().generate_text(prompt, system_instruction)


def generate_json(prompt: str) -> Any:
    return get_generation_service().generate_json(prompt)
