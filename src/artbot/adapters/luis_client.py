"""LUIS v2 prediction client for the dispatch model."""

from dataclasses import dataclass

import httpx

from artbot.domain.intents import RecognizerResult
from artbot.errors import IntentRecognitionError
from artbot.services.intents import LanguageUnderstandingClient


@dataclass
class HttpxLuisClient(LanguageUnderstandingClient):
    """Dispatch recognizer calling the LUIS v2 REST endpoint."""

    app_id: str
    api_key: str
    host_name: str
    http_client: httpx.AsyncClient
    timeout: float = 15.0

    @classmethod
    def create(
        cls, app_id: str, api_key: str, host_name: str, timeout: float = 15.0
    ) -> "HttpxLuisClient":
        """Create a LUIS client with a managed httpx session."""
        host = host_name.removeprefix("https://").removeprefix("http://").rstrip("/")
        return cls(
            app_id=app_id,
            api_key=api_key,
            host_name=host,
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def recognize(self, utterance: str) -> RecognizerResult:
        """Return the top intent, scores, and connected sub-intent."""
        url = f"https://{self.host_name}/luis/v2.0/apps/{self.app_id}"
        try:
            response = await self.http_client.get(
                url,
                params={
                    "q": utterance,
                    "verbose": "true",
                    "subscription-key": self.api_key,
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise IntentRecognitionError(f"LUIS request failed: {exc}") from exc
        return parse_luis_response(payload)


def parse_luis_response(payload: object) -> RecognizerResult:
    """Map a verbose LUIS v2 response to a recognizer result."""
    if not isinstance(payload, dict):
        raise IntentRecognitionError("Unexpected LUIS response")
    top = payload.get("topScoringIntent")
    if not isinstance(top, dict) or not top.get("intent"):
        raise IntentRecognitionError("LUIS response has no top intent")

    scores: dict[str, float] = {}
    for entry in payload.get("intents") or []:
        if isinstance(entry, dict) and entry.get("intent"):
            scores[str(entry["intent"])] = float(entry.get("score") or 0.0)

    sub_intent = None
    connected = payload.get("connectedServiceResult")
    if isinstance(connected, dict):
        connected_top = connected.get("topScoringIntent")
        if isinstance(connected_top, dict) and connected_top.get("intent"):
            sub_intent = str(connected_top["intent"])

    return RecognizerResult(
        top_intent=str(top["intent"]), scores=scores, sub_intent=sub_intent
    )
