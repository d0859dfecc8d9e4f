"""OpenAI Responses API client for nutrient estimation and translation."""

import json
from dataclasses import dataclass

from openai import AsyncOpenAI

from nutrition_pipeline.errors import ConfigurationError
from nutrition_pipeline.services.estimator import NutrientEstimatorClient
from nutrition_pipeline.services.translation import Translator

_TRANSLATION_PROMPT = (
    "Translate the following text to {language}. "
    "Only return the translation, nothing else:\n\n{text}"
)


@dataclass
class OpenAIResponsesClient(NutrientEstimatorClient, Translator):
    """Estimator and translator backed by the OpenAI Responses API."""

    client: AsyncOpenAI | None
    translation_model: str = "gpt-4o-mini"
    translation_temperature: float = 0.3

    @classmethod
    def create(
        cls, api_key: str | None, translation_model: str = "gpt-4o-mini"
    ) -> "OpenAIResponsesClient":
        """Create a client; calls fail with a configuration error without a key."""
        return cls(
            client=AsyncOpenAI(api_key=api_key) if api_key else None,
            translation_model=translation_model,
        )

    async def generate(
        self, *, model: str, prompt: str, schema: dict[str, object], name: str
    ) -> dict[str, object]:
        """Call the Responses API with a strict JSON schema output."""
        client = self._require_client()
        response = await client.responses.create(
            model=model,
            input=[
                {
                    "role": "user",
                    "content": [{"type": "input_text", "text": prompt}],
                }
            ],
            text={
                "format": {
                    "type": "json_schema",
                    "name": name,
                    "strict": True,
                    "schema": schema,
                }
            },
        )
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return json.loads(output_text)

    async def translate(self, text: str, target_language: str) -> str:
        """Translate text into a target language."""
        client = self._require_client()
        response = await client.responses.create(
            model=self.translation_model,
            input=_TRANSLATION_PROMPT.format(language=target_language, text=text),
            temperature=self.translation_temperature,
        )
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty translation")
        return output_text.strip()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        if self.client is not None:
            await self.client.close()

    def _require_client(self) -> AsyncOpenAI:
        if self.client is None:
            raise ConfigurationError("OPENAI_API_KEY is not configured")
        return self.client
