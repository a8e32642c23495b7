"""Translator Text API v3 client."""

import uuid
from dataclasses import dataclass

import httpx

from artbot.errors import TranslationError
from artbot.services.translation import Translator

_API_VERSION = "3.0"


@dataclass
class HttpxTranslatorClient(Translator):
    """Translator client implemented with httpx."""

    key: str
    location: str
    endpoint: str
    http_client: httpx.AsyncClient
    timeout: float = 15.0

    @classmethod
    def create(
        cls, key: str, location: str, endpoint: str, timeout: float = 15.0
    ) -> "HttpxTranslatorClient":
        """Create a translator client with a managed httpx session."""
        return cls(
            key=key,
            location=location,
            endpoint=endpoint.rstrip("/"),
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def detect_language(self, text: str) -> str:
        """Detect the language of text."""
        payload = await self._post("detect", {}, text)
        try:
            return str(payload[0]["language"])
        except (LookupError, TypeError) as exc:
            raise TranslationError("Unexpected detect response") from exc

    async def translate(self, text: str, source: str, target: str) -> str:
        """Translate text between two languages."""
        payload = await self._post("translate", {"from": source, "to": target}, text)
        try:
            return str(payload[0]["translations"][0]["text"])
        except (LookupError, TypeError) as exc:
            raise TranslationError("Unexpected translate response") from exc

    async def _post(self, path: str, params: dict[str, str], text: str) -> object:
        try:
            response = await self.http_client.post(
                f"{self.endpoint}/{path}",
                params={"api-version": _API_VERSION, **params},
                headers={
                    "Ocp-Apim-Subscription-Key": self.key,
                    "Ocp-Apim-Subscription-Region": self.location,
                    "X-ClientTraceId": str(uuid.uuid4()),
                },
                json=[{"Text": text}],
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise TranslationError(f"Translator {path} failed: {exc}") from exc

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
