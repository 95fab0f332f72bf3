import functools
import logging
import time
from typing import Callable, TypeVar

import httpx
from supabase import Client

from waitify.core.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


def init_db():
    """Startup check: one cheap query against profiles.

    Schema, the add_waitlist_entry function and the invoice business
    column are applied from supabase/migrations, not from here. A failed
    check only logs; the API still starts.
    """
    if not settings.supabase_url or not settings.supabase_secret_key:
        logger.warning("Supabase credentials not configured. Database features disabled.")
        return

    try:
        client = get_db()
        client.table("profiles").select("id").limit(1).execute()
        logger.info("Supabase connection verified")
    except Exception as e:
        logger.warning(f"Supabase connection check failed: {e}")


def get_db() -> Client:
    """Client used by every repository.

    Resolved at call time so tests can swap in an in-memory client.
    """
    from .supabase_client import get_supabase_client
    return get_supabase_client()


def with_retry(max_retries: int = 2, delay: float = 0.1) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Retry a repository call when the HTTP connection to Supabase drops.

    Only transport errors (disconnects, refused connections) are retried,
    on a fresh client. PostgREST and RPC errors, including the unique
    position constraint, propagate on the first attempt.

    Args:
        max_retries: Maximum number of retry attempts (default 2)
        delay: Delay in seconds between retries (default 0.1)
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> T:
            from .supabase_client import reset_supabase_client

            last_error = None
            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except (httpx.RemoteProtocolError, httpx.ConnectError) as e:
                    last_error = e
                    if attempt < max_retries:
                        logger.warning(
                            f"Connection error in {func.__name__}, retrying ({attempt + 1}/{max_retries}): {e}"
                        )
                        reset_supabase_client()
                        time.sleep(delay)
                    else:
                        logger.error(f"Connection error in {func.__name__} after {max_retries} retries: {e}")
                        raise
            raise last_error
        return wrapper
    return decorator
