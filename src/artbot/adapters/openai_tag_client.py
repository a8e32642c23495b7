"""OpenAI Responses API client for image tagging."""

import json
from dataclasses import dataclass

import openai
from openai import AsyncOpenAI

from artbot.errors import ClassificationError
from artbot.services.tagging import ImageTagClient


@dataclass
class OpenAITagClient(ImageTagClient):
    """Tag client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str, timeout: float = 15.0) -> "OpenAITagClient":
        """Create an OpenAI tag client."""
        return cls(client=AsyncOpenAI(api_key=api_key, timeout=timeout))

    async def extract(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        image_url: str,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Call OpenAI Responses API with structured outputs."""
        request_payload: dict[str, object] = {
            "model": model,
            "input": [
                {
                    "role": "user",
                    "content": [
                        {"type": "input_text", "text": prompt},
                        {"type": "input_image", "image_url": image_url},
                    ],
                }
            ],
            "text": {
                "format": {
                    "type": "json_schema",
                    "name": "image_tags",
                    "strict": True,
                    "schema": schema,
                }
            },
            "store": store,
        }
        if reasoning_effort:
            request_payload["reasoning"] = {"effort": reasoning_effort}

        try:
            response = await self.client.responses.create(**request_payload)
        except openai.OpenAIError as exc:
            raise ClassificationError(f"OpenAI request failed: {exc}") from exc
        output_text = response.output_text
        if not output_text:
            raise ClassificationError("OpenAI returned an empty response")
        try:
            return json.loads(output_text)
        except json.JSONDecodeError as exc:
            raise ClassificationError("OpenAI returned malformed JSON") from exc

    async def close(self) -> None:
        """Close the underlying OpenAI client."""
        await self.client.close()
