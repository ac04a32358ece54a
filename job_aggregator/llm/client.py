"""OpenAI JSON-mode client used by the query generators, source selector and CV parser."""

import json
import logging
from typing import Any, Optional, Protocol

import openai
from openai import OpenAI

from job_aggregator.errors import GenerationError, UpstreamAuthError

logger = logging.getLogger("job_aggregator.llm")


class JSONModel(Protocol):
    """Anything that can turn a system + user prompt into a parsed JSON object."""

    def complete_json(self, system: str, user: str, temperature: float) -> dict[str, Any]:
        ...


def parse_json_content(content: Optional[str]) -> dict[str, Any]:
    """Parse model output into a dict, raising GenerationError when that is impossible."""
    if content is None or not content.strip():
        raise GenerationError("No response from AI")

    content = content.strip()
    # JSON mode should never fence its output, but older models sometimes do
    if content.startswith("```"):
        content = content.split("\n", 1)[1] if "\n" in content else ""
        content = content.rsplit("```", 1)[0].strip()

    try:
        parsed = json.loads(content)
    except json.JSONDecodeError as e:
        logger.warning("Failed to parse AI response as JSON: %s", e)
        raise GenerationError(f"AI response was not valid JSON: {e}") from e

    if not isinstance(parsed, dict):
        raise GenerationError("AI response was not a JSON object")

    return parsed


class LLMClient:
    """Thin wrapper around the OpenAI chat completions API in JSON mode."""

    def __init__(self, api_key: str, model: str = "gpt-4o-mini", client: Optional[OpenAI] = None):
        if client is None and not api_key:
            raise UpstreamAuthError("OpenAI API key is not configured")
        self.model = model
        self._client = client or OpenAI(api_key=api_key)

    def complete_json(self, system: str, user: str, temperature: float) -> dict[str, Any]:
        try:
            response = self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
                response_format={"type": "json_object"},
                temperature=temperature,
            )
        except (openai.AuthenticationError, openai.PermissionDeniedError) as e:
            raise UpstreamAuthError(f"OpenAI rejected the API key: {e}") from e
        except openai.OpenAIError as e:
            logger.warning("OpenAI request failed: %s", e)
            raise GenerationError(f"AI request failed: {e}") from e

        if not response.choices:
            raise GenerationError("No response from AI")

        content = response.choices[0].message.content
        logger.debug("AI raw output (%s): %s", self.model, content)
        return parse_json_content(content)
