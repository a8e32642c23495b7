"""QnA Maker generateAnswer client."""

from dataclasses import dataclass

import httpx

from artbot.domain.knowledge import RankedAnswer
from artbot.errors import KnowledgeLookupError
from artbot.services.knowledge import KnowledgeBaseClient

# Placeholder id the service returns when no answer was found.
_NO_ANSWER_ID = -1


@dataclass
class HttpxQnAClient(KnowledgeBaseClient):
    """Knowledge base client for a published QnA Maker knowledge base."""

    knowledgebase_id: str
    endpoint_key: str
    host_name: str
    http_client: httpx.AsyncClient
    timeout: float = 15.0

    @classmethod
    def create(
        cls,
        knowledgebase_id: str,
        endpoint_key: str,
        host_name: str,
        timeout: float = 15.0,
    ) -> "HttpxQnAClient":
        """Create a QnA client with a managed httpx session."""
        return cls(
            knowledgebase_id=knowledgebase_id,
            endpoint_key=endpoint_key,
            host_name=host_name.rstrip("/"),
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def get_answers(self, question: str, top: int = 1) -> list[RankedAnswer]:
        """Return answers with scores normalized to 0..1."""
        base = self.host_name
        if not base.startswith(("http://", "https://")):
            base = f"https://{base}"
        if not base.endswith("/qnamaker"):
            base = f"{base}/qnamaker"
        url = f"{base}/knowledgebases/{self.knowledgebase_id}/generateAnswer"
        try:
            response = await self.http_client.post(
                url,
                headers={"Authorization": f"EndpointKey {self.endpoint_key}"},
                json={"question": question, "top": top},
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise KnowledgeLookupError(f"QnA request failed: {exc}") from exc
        if not isinstance(payload, dict):
            raise KnowledgeLookupError("Unexpected QnA response")

        entries = payload.get("answers") or []
        if not isinstance(entries, list):
            raise KnowledgeLookupError("QnA answers are not a list")

        answers: list[RankedAnswer] = []
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            if entry.get("id") == _NO_ANSWER_ID or not entry.get("answer"):
                continue
            try:
                score = float(entry.get("score") or 0.0) / 100
            except (TypeError, ValueError) as exc:
                raise KnowledgeLookupError("QnA answer has an invalid score") from exc
            answers.append(RankedAnswer(answer=str(entry["answer"]), score=score))
        return answers

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
