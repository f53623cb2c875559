"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from calorie_tracker.adapters.image_fetcher import HttpxImageFetcher
from calorie_tracker.adapters.openai_inference_client import OpenAIInferenceClient
from calorie_tracker.adapters.supabase_entry_repository import SupabaseEntryRepository
from calorie_tracker.adapters.supabase_goal_repository import SupabaseGoalRepository
from calorie_tracker.adapters.supabase_stats_repository import SupabaseStatsRepository
from calorie_tracker.config import Settings
from calorie_tracker.services.analysis import AnalysisService
from calorie_tracker.services.entries import EntryService
from calorie_tracker.services.goals import GoalService
from calorie_tracker.services.stats import StatsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    analysis_service: AnalysisService
    entry_service: EntryService
    goal_service: GoalService
    stats_service: StatsService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    entry_repository = SupabaseEntryRepository(supabase_client)
    goal_repository = SupabaseGoalRepository(supabase_client)
    stats_repository = SupabaseStatsRepository(supabase_client)
    image_fetcher = HttpxImageFetcher.create()
    analysis_service = AnalysisService(
        client=OpenAIInferenceClient.create(resolved_settings.openai_api_key),
        image_fetcher=image_fetcher,
        entry_repository=entry_repository,
        model=resolved_settings.openai_model,
        temperature=resolved_settings.openai_temperature,
        max_items=resolved_settings.max_items,
        override_margin=resolved_settings.total_override_margin,
    )
    goal_service = GoalService(goal_repository)
    stats_service = StatsService(
        repository=stats_repository,
        goal_service=goal_service,
        timezone_name=resolved_settings.timezone,
    )

    async def close_resources() -> None:
        await image_fetcher.close()

    return AppContainer(
        settings=resolved_settings,
        analysis_service=analysis_service,
        entry_service=EntryService(entry_repository),
        goal_service=goal_service,
        stats_service=stats_service,
        close_resources=close_resources,
    )
