"""Shared test fixtures."""

from dataclasses import dataclass, field

import pytest

from artbot.adapters.connector_client import ConnectorClient
from artbot.config import Settings
from artbot.containers import AppContainer
from artbot.domain.activities import Activity, Reply
from artbot.domain.catalog import CatalogRecord
from artbot.domain.intents import RecognizerResult
from artbot.domain.knowledge import RankedAnswer, SearchResult
from artbot.errors import (
    ClassificationError,
    IntentRecognitionError,
    KnowledgeLookupError,
    SearchError,
    StorageError,
    StoreQueryError,
    TranslationError,
)
from artbot.services.cache import TtlCache
from artbot.services.catalog import CatalogRepository, CatalogService
from artbot.services.intents import IntentRouter, LanguageUnderstandingClient
from artbot.services.knowledge import (
    KnowledgeBaseClient,
    KnowledgeService,
    WebSearchClient,
)
from artbot.services.matching import SequentialRecordMatcher
from artbot.services.state import SessionStateService, StateStore
from artbot.services.tagging import ImageTagClient, ImageTagService
from artbot.services.translation import LanguageBridge, Translator
from artbot.services.turns import TurnController
from artbot.services.uploads import (
    AttachmentDownloader,
    AttachmentUploadService,
    BlobStorage,
)

STARRY_NIGHT = CatalogRecord(
    paintid=5,
    title="The Starry Night",
    author="Vincent van Gogh",
    year="1889",
    style="Post-Impressionism",
    technique="Oil on canvas",
    url="https://img.example/starry-night.jpg",
    tags=("outdoor", "sky", "night", "tree"),
)
MONA_LISA = CatalogRecord(
    paintid=3,
    title="Mona Lisa",
    author="Leonardo da Vinci",
    year="1503",
    style="High Renaissance",
    technique="Oil on poplar panel",
    url="https://img.example/mona-lisa.jpg",
    tags=("person", "woman", "indoor", "sky"),
)


@dataclass
class InMemoryCatalogRepository(CatalogRepository):
    """In-memory catalog with one row per (painting, tag)."""

    records: list[CatalogRecord] = field(
        default_factory=lambda: [MONA_LISA, STARRY_NIGHT]
    )
    fail: bool = False
    count_calls: list[int] = field(default_factory=list)

    def count_tag_matches(self, record_id: int, tag_names: list[str]) -> int:
        self._check()
        self.count_calls.append(record_id)
        return sum(
            1
            for record in self.records
            if record.paintid == record_id
            for tag in record.tags
            if tag in tag_names
        )

    def list_tag_matches(self, tag_names: list[str]) -> list[int]:
        self._check()
        return [
            record.paintid
            for record in self.records
            for tag in record.tags
            if tag in tag_names
        ]

    def get_record(self, record_id: int) -> CatalogRecord | None:
        self._check()
        for record in self.records:
            if record.paintid == record_id:
                return record
        return None

    def _check(self) -> None:
        if self.fail:
            raise StoreQueryError("catalog unavailable")


@dataclass
class InMemoryStateStore(StateStore):
    """In-memory keyed document store."""

    documents: dict[str, dict[str, object]] = field(default_factory=dict)
    fail_load: bool = False
    fail_save: bool = False
    saves: list[str] = field(default_factory=list)

    def load(self, key: str) -> dict[str, object] | None:
        if self.fail_load:
            raise StoreQueryError("state unavailable")
        document = self.documents.get(key)
        return dict(document) if document is not None else None

    def save(self, key: str, document: dict[str, object]) -> None:
        if self.fail_save:
            raise StoreQueryError("state unavailable")
        self.saves.append(key)
        self.documents[key] = dict(document)


@dataclass
class FakeTranslator(Translator):
    """Translator that detects from a lookup table and tags translations."""

    languages: dict[str, str] = field(default_factory=dict)
    translations: dict[tuple[str, str], str] = field(default_factory=dict)
    fail: bool = False
    calls: list[tuple[str, str, str]] = field(default_factory=list)

    async def detect_language(self, text: str) -> str:
        if self.fail:
            raise TranslationError("translator unavailable")
        return self.languages.get(text, "en")

    async def translate(self, text: str, source: str, target: str) -> str:
        if self.fail:
            raise TranslationError("translator unavailable")
        self.calls.append((text, source, target))
        return self.translations.get((text, target), f"[{target}] {text}")


@dataclass
class FakeTagClient(ImageTagClient):
    """Fake vision client returning a fixed tag payload."""

    payload: dict[str, object] = field(
        default_factory=lambda: {
            "tags": [
                {"name": "outdoor", "confidence": 0.98},
                {"name": "sky", "confidence": 0.95},
                {"name": "tree", "confidence": 0.7},
            ]
        }
    )
    fail: bool = False
    image_urls: list[str] = field(default_factory=list)

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
        self.image_urls.append(image_url)
        if self.fail:
            raise ClassificationError("vision unavailable")
        return self.payload


@dataclass
class FakeLuisClient(LanguageUnderstandingClient):
    """Fake dispatch recognizer with a fixed result."""

    result: RecognizerResult = field(
        default_factory=lambda: RecognizerResult(top_intent="art_qna")
    )
    fail: bool = False
    utterances: list[str] = field(default_factory=list)

    async def recognize(self, utterance: str) -> RecognizerResult:
        self.utterances.append(utterance)
        if self.fail:
            raise IntentRecognitionError("luis unavailable")
        return self.result


@dataclass
class FakeKnowledgeBase(KnowledgeBaseClient):
    """Fake knowledge base with canned answers."""

    answers: list[RankedAnswer] = field(default_factory=list)
    fail: bool = False

    async def get_answers(self, question: str, top: int = 1) -> list[RankedAnswer]:
        if self.fail:
            raise KnowledgeLookupError("qna unavailable")
        return list(self.answers)


@dataclass
class FakeWebSearch(WebSearchClient):
    """Fake web search with canned results."""

    results: list[SearchResult] = field(
        default_factory=lambda: [
            SearchResult(name=f"Result {index}", url=f"https://search.test/{index}")
            for index in range(1, 6)
        ]
    )
    fail: bool = False
    queries: list[str] = field(default_factory=list)

    async def search(self, query: str, count: int = 3) -> list[SearchResult]:
        self.queries.append(query)
        if self.fail:
            raise SearchError("search unavailable")
        return list(self.results)


@dataclass
class FakeDownloader(AttachmentDownloader):
    """Downloader that returns static bytes."""

    content: bytes = b"fake-image-bytes"
    fail_urls: set[str] = field(default_factory=set)

    async def download(self, url: str) -> tuple[bytes, str | None]:
        if url in self.fail_urls:
            raise StorageError(f"cannot download {url}")
        return self.content, "image/jpeg"


@dataclass
class InMemoryBlobStorage(BlobStorage):
    """Blob storage that keeps uploads in memory."""

    blobs: dict[str, bytes] = field(default_factory=dict)
    fail: bool = False

    def upload(self, name: str, data: bytes, content_type: str) -> str:
        if self.fail:
            raise StorageError("bucket unavailable")
        self.blobs[name] = data
        return f"https://blob.test/{name}"


@dataclass
class FakeConnectorClient(ConnectorClient):
    """Connector that records outbound replies."""

    sent: list[tuple[str, Reply]] = field(default_factory=list)
    error: Exception | None = None
    attempts: int = 0

    async def send_activity(self, activity: Activity, reply: Reply) -> None:
        self.attempts += 1
        if self.error is not None:
            raise self.error
        self.sent.append((activity.conversation.id, reply))


@dataclass
class TurnFakes:
    """Collaborators behind a turn controller built for tests."""

    catalog: InMemoryCatalogRepository = field(
        default_factory=InMemoryCatalogRepository
    )
    state_store: InMemoryStateStore = field(default_factory=InMemoryStateStore)
    translator: FakeTranslator = field(default_factory=FakeTranslator)
    tag_client: FakeTagClient = field(default_factory=FakeTagClient)
    luis: FakeLuisClient = field(default_factory=FakeLuisClient)
    knowledge_base: FakeKnowledgeBase = field(default_factory=FakeKnowledgeBase)
    web_search: FakeWebSearch = field(default_factory=FakeWebSearch)
    downloader: FakeDownloader = field(default_factory=FakeDownloader)
    blob_storage: InMemoryBlobStorage = field(default_factory=InMemoryBlobStorage)


def build_turn_controller(fakes: TurnFakes, catalog_size: int = 8) -> TurnController:
    return TurnController(
        state_service=SessionStateService(store=fakes.state_store),
        language_bridge=LanguageBridge(translator=fakes.translator),
        tag_service=ImageTagService(
            client=fakes.tag_client,
            model="gpt-5.2",
            reasoning_effort="low",
            store=False,
        ),
        matcher=SequentialRecordMatcher(
            repository=fakes.catalog, catalog_size=catalog_size
        ),
        catalog_service=CatalogService(repository=fakes.catalog, cache=TtlCache()),
        intent_router=IntentRouter(fakes.luis),
        knowledge_service=KnowledgeService(
            knowledge_base=fakes.knowledge_base, web_search=fakes.web_search
        ),
        upload_service=AttachmentUploadService(
            downloader=fakes.downloader, storage=fakes.blob_storage
        ),
    )


def make_activity(
    text: str | None = None,
    *,
    activity_type: str = "message",
    attachments: list[dict[str, object]] | None = None,
    members_added: list[dict[str, object]] | None = None,
) -> Activity:
    payload: dict[str, object] = {
        "type": activity_type,
        "id": "activity-1",
        "channelId": "webchat",
        "serviceUrl": "https://connector.test",
        "from": {"id": "user-1", "name": "Ada"},
        "recipient": {"id": "bot-1", "name": "ArtBot"},
        "conversation": {"id": "conv-1"},
    }
    if text is not None:
        payload["text"] = text
    if attachments is not None:
        payload["attachments"] = attachments
    if members_added is not None:
        payload["membersAdded"] = members_added
    return Activity.model_validate(payload)


def texts(replies: list[Reply]) -> list[str | None]:
    return [reply.text for reply in replies]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        openai_api_key="openai-key",
        luis_app_id="luis-app",
        luis_api_key="luis-key",
        luis_api_host_name="westus.api.cognitive.microsoft.com",
        qna_knowledgebase_id="kb-1",
        qna_endpoint_key="qna-key",
        qna_endpoint_host_name="https://qna.test/qnamaker",
        translator_key="translator-key",
        translator_location="westus",
        search_key="search-key",
    )


@pytest.fixture
def fakes() -> TurnFakes:
    return TurnFakes()


@pytest.fixture
def turn_controller(fakes: TurnFakes) -> TurnController:
    return build_turn_controller(fakes)


@pytest.fixture
def connector_client() -> FakeConnectorClient:
    return FakeConnectorClient()


@pytest.fixture
def container(
    settings: Settings,
    turn_controller: TurnController,
    connector_client: FakeConnectorClient,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        connector_client=connector_client,
        turn_controller=turn_controller,
        close_resources=close_resources,
    )
