"""
Supabase client for the Waitify API.

FastAPI runs sync endpoints in a threadpool; each worker thread keeps its
own client. Repositories never import this module directly, they go
through database.connection.get_db().
"""

import logging
import threading

from supabase import create_client, Client

from waitify.core.config import settings

logger = logging.getLogger(__name__)

_thread_local = threading.local()


def get_supabase_client() -> Client:
    """Client for the current thread, created on first use.

    Authenticates with the service key, so row-level security does not
    apply: every waitlist, table, appointment and invoice query filters by
    business id or user id itself.
    """
    if not settings.supabase_url or not settings.supabase_secret_key:
        raise RuntimeError(
            "Supabase credentials not configured. "
            "Set SUPABASE_URL and SUPABASE_SECRET_KEY."
        )

    client = getattr(_thread_local, "client", None)
    if client is None:
        client = create_client(settings.supabase_url, settings.supabase_secret_key)
        _thread_local.client = client
        logger.debug(f"Created Supabase client for thread {threading.current_thread().name}")
    return client


def reset_supabase_client() -> None:
    """Forget this thread's client after a dropped connection (see with_retry)."""
    _thread_local.__dict__.pop("client", None)
