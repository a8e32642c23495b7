"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from artbot.adapters.attachment_client import HttpxAttachmentDownloader
from artbot.adapters.bing_search_client import HttpxBingSearchClient
from artbot.adapters.connector_client import ConnectorClient, HttpxConnectorClient
from artbot.adapters.luis_client import HttpxLuisClient
from artbot.adapters.openai_tag_client import OpenAITagClient
from artbot.adapters.qna_client import HttpxQnAClient
from artbot.adapters.supabase_blob_storage import SupabaseBlobStorage
from artbot.adapters.supabase_catalog_repository import SupabaseCatalogRepository
from artbot.adapters.supabase_state_store import SupabaseStateStore
from artbot.adapters.translator_client import HttpxTranslatorClient
from artbot.config import Settings, parse_trusted_hosts, resolve_match_strategy
from artbot.services.cache import TtlCache
from artbot.services.catalog import CatalogService
from artbot.services.intents import IntentRouter
from artbot.services.knowledge import KnowledgeService
from artbot.services.matching import build_matcher
from artbot.services.state import SessionStateService
from artbot.services.tagging import ImageTagService
from artbot.services.translation import LanguageBridge
from artbot.services.turns import TurnController
from artbot.services.uploads import AttachmentUploadService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    connector_client: ConnectorClient
    turn_controller: TurnController
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    timeout = resolved_settings.http_timeout_seconds
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    catalog_repository = SupabaseCatalogRepository(
        supabase_client, table=resolved_settings.catalog_table
    )
    state_store = SupabaseStateStore(
        supabase_client, table=resolved_settings.state_table
    )
    blob_storage = SupabaseBlobStorage(
        supabase_client, bucket=resolved_settings.blob_bucket
    )

    tag_client = OpenAITagClient.create(resolved_settings.openai_api_key, timeout)
    translator_client = HttpxTranslatorClient.create(
        key=resolved_settings.translator_key,
        location=resolved_settings.translator_location,
        endpoint=resolved_settings.translator_endpoint,
        timeout=timeout,
    )
    luis_client = HttpxLuisClient.create(
        app_id=resolved_settings.luis_app_id,
        api_key=resolved_settings.luis_api_key,
        host_name=resolved_settings.luis_api_host_name,
        timeout=timeout,
    )
    qna_client = HttpxQnAClient.create(
        knowledgebase_id=resolved_settings.qna_knowledgebase_id,
        endpoint_key=resolved_settings.qna_endpoint_key,
        host_name=resolved_settings.qna_endpoint_host_name,
        timeout=timeout,
    )
    search_client = HttpxBingSearchClient.create(
        subscription_key=resolved_settings.search_key,
        endpoint=resolved_settings.search_endpoint,
        timeout=timeout,
    )
    downloader = HttpxAttachmentDownloader.create()
    connector_client = HttpxConnectorClient.create(
        app_id=resolved_settings.microsoft_app_id,
        app_password=resolved_settings.microsoft_app_password,
        trusted_hosts=parse_trusted_hosts(resolved_settings.trusted_service_hosts),
        timeout=timeout,
    )

    turn_controller = TurnController(
        state_service=SessionStateService(
            store=state_store, pivot_language=resolved_settings.pivot_language
        ),
        language_bridge=LanguageBridge(
            translator=translator_client,
            pivot_language=resolved_settings.pivot_language,
        ),
        tag_service=ImageTagService(
            client=tag_client,
            model=resolved_settings.openai_model,
            reasoning_effort=resolved_settings.openai_reasoning_effort,
            store=resolved_settings.openai_store,
        ),
        matcher=build_matcher(
            resolve_match_strategy(resolved_settings.match_strategy),
            catalog_repository,
            catalog_size=resolved_settings.catalog_size,
            concurrency=resolved_settings.match_concurrency,
        ),
        catalog_service=CatalogService(repository=catalog_repository, cache=TtlCache()),
        intent_router=IntentRouter(luis_client),
        knowledge_service=KnowledgeService(
            knowledge_base=qna_client,
            web_search=search_client,
            score_threshold=resolved_settings.qna_score_threshold,
        ),
        upload_service=AttachmentUploadService(
            downloader=downloader, storage=blob_storage
        ),
    )

    async def close_resources() -> None:
        await connector_client.close()
        await tag_client.close()
        await translator_client.close()
        await luis_client.close()
        await qna_client.close()
        await search_client.close()
        await downloader.close()

    return AppContainer(
        settings=resolved_settings,
        connector_client=connector_client,
        turn_controller=turn_controller,
        close_resources=close_resources,
    )
