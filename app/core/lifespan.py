import contextlib
from contextlib import asynccontextmanager
import asyncio
import logging

from app.ai.config import load_ai_config
from app.ai.factory import get_ai_client
from app.core.config import settings
from app.integrations.supabase import SupabaseClient
from app.services.subscription_service import expire_canceled_subscriptions

logger = logging.getLogger(__name__)


async def periodic_expiry_sweep(supabase: SupabaseClient, stop_event: asyncio.Event, interval_s: float) -> None:
    while not stop_event.is_set():
        try:
            result = await expire_canceled_subscriptions(supabase)
            if result.processed:
                logger.info("expiry_sweep_done processed=%s", result.processed)
        except Exception:
            logger.exception("expiry_sweep_failed")
        try:
            await asyncio.wait_for(stop_event.wait(), timeout=interval_s)
        except asyncio.TimeoutError:
            continue


@asynccontextmanager
async def lifespan(app):
    supabase = SupabaseClient.from_settings(settings) if settings.supabase_configured else None
    if supabase is None:
        logger.warning("supabase_not_configured")

    ai_config = load_ai_config()
    ai_client = get_ai_client(ai_config) if ai_config.api_key else None
    if ai_client is None:
        logger.warning("ai_client_not_configured provider=%s", ai_config.provider)

    app.state.supabase = supabase
    app.state.ai_client = ai_client

    stop_event = asyncio.Event()
    sweep_task = None
    if settings.expiry_sweep_enabled and supabase is not None:
        sweep_task = asyncio.create_task(
            periodic_expiry_sweep(supabase, stop_event, settings.expiry_sweep_interval_s)
        )

    yield

    stop_event.set()
    if sweep_task is not None:
        if not sweep_task.done():
            sweep_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await sweep_task
    if ai_client is not None:
        await ai_client.aclose()
    if supabase is not None:
        await supabase.aclose()
