"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from nutrition_pipeline.adapters.fdc_client import HttpxFdcClient
from nutrition_pipeline.adapters.openai_client import OpenAIResponsesClient
from nutrition_pipeline.adapters.qstash_client import HttpxQStashClient
from nutrition_pipeline.adapters.supabase_content_store import SupabaseContentStore
from nutrition_pipeline.config import Settings, parse_data_types, parse_locales
from nutrition_pipeline.services.aggregator import RecipeAggregator
from nutrition_pipeline.services.catalog import CatalogRepository
from nutrition_pipeline.services.cleanup import LifecycleCleanup
from nutrition_pipeline.services.dispatcher import JobDispatcher
from nutrition_pipeline.services.estimator import GenerativeNutritionProvider
from nutrition_pipeline.services.events import ContentEventHandler
from nutrition_pipeline.services.ingredient_nutrition import IngredientNutritionService
from nutrition_pipeline.services.jobs import JobConsumer
from nutrition_pipeline.services.nutrition import FdcNutritionProvider
from nutrition_pipeline.services.recipe_nutrition import RecipeNutritionService
from nutrition_pipeline.services.resolver import NutritionResolver
from nutrition_pipeline.services.signatures import SignatureVerifier
from nutrition_pipeline.services.translation import TranslationService
from nutrition_pipeline.services.units import UnitConverter


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    job_consumer: JobConsumer
    content_events: ContentEventHandler
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    primary_locale = resolved_settings.primary_locale
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    store = SupabaseContentStore(supabase_client, default_locale=primary_locale)
    catalog = CatalogRepository(store, primary_locale=primary_locale)

    fdc_client = HttpxFdcClient.create(
        api_key=resolved_settings.fdc_api_key,
        base_url=resolved_settings.fdc_base_url,
    )
    openai_client = OpenAIResponsesClient.create(
        resolved_settings.openai_api_key,
        translation_model=resolved_settings.openai_model,
    )
    qstash_client = HttpxQStashClient.create(
        token=resolved_settings.qstash_token,
        base_url=resolved_settings.qstash_url,
    )

    resolver = NutritionResolver(
        providers=[
            FdcNutritionProvider(
                fdc_client=fdc_client,
                page_size=resolved_settings.fdc_page_size,
                data_types=parse_data_types(resolved_settings.fdc_data_types),
            ),
            GenerativeNutritionProvider(
                client=openai_client, model=resolved_settings.openai_model
            ),
        ]
    )
    translation_service = TranslationService(
        store=store,
        translator=openai_client,
        primary_locale=primary_locale,
        target_locales=parse_locales(
            resolved_settings.translation_locales, exclude=primary_locale
        ),
    )
    job_consumer = JobConsumer(
        verifier=SignatureVerifier(
            current_key=resolved_settings.qstash_current_signing_key,
            next_key=resolved_settings.qstash_next_signing_key,
        ),
        ingredient_nutrition=IngredientNutritionService(catalog, resolver),
        translation=translation_service,
    )
    content_events = ContentEventHandler(
        dispatcher=JobDispatcher(qstash_client, resolved_settings.app_url),
        recipe_nutrition=RecipeNutritionService(
            catalog, RecipeAggregator(UnitConverter(piece_weights=catalog))
        ),
        cleanup=LifecycleCleanup(
            catalog, batch_size=resolved_settings.cleanup_batch_size
        ),
        primary_locale=primary_locale,
    )

    async def close_resources() -> None:
        await fdc_client.close()
        await qstash_client.close()
        await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        job_consumer=job_consumer,
        content_events=content_events,
        close_resources=close_resources,
    )
