# core/supabase_client.py

from typing import Optional

from supabase import create_client, Client
from core.config import settings
from core.logging_config import logger


TABLES = [
    "profiles",
    "land_records",
    "ownership_documents",
    "transactions",
    "notifications",
    "zoning_laws",
]


# ============================================================
# Anon client (public key)
# ============================================================

def get_supabase_client() -> Optional[Client]:
    """
    Creates a Supabase client with the public (anon) key.
    Row-level security applies; without a user token the caller
    is anonymous and every table policy denies.
    Used for sign-in / sign-up and token validation.
    """
    supabase_url = settings.SUPABASE_URL
    supabase_key = settings.SUPABASE_ANON_KEY

    if not supabase_url or not supabase_key:
        logger.error("Missing Supabase credentials")
        logger.error(f"   URL: {supabase_url}")
        logger.error(f"   ANON KEY: {'SET' if supabase_key else 'MISSING'}")
        return None

    try:
        return create_client(supabase_url, supabase_key)
    except Exception as e:
        logger.error(f"Supabase Init Error: {e}", exc_info=True)
        return None


# ============================================================
# User client (anon key + caller JWT)
# ============================================================

def get_user_client(access_token: str) -> Optional[Client]:
    """
    A fresh client per request that acts as the calling user.
    PostgREST evaluates auth.uid() from the bearer token, so every
    query is filtered by the table policies.
    """
    client = get_supabase_client()
    if client is None:
        return None

    client.postgrest.auth(access_token)
    return client


# ============================================================
# Service-role client (server-initiated writes)
# ============================================================

def get_admin_client() -> Optional[Client]:
    """
    Service-role client. Bypasses row-level security, so it is only
    used for system actions such as inserting notifications.
    """
    supabase_url = settings.SUPABASE_URL
    service_key = settings.SUPABASE_SERVICE_ROLE_KEY

    if not supabase_url or not service_key:
        logger.warning("Service role key not configured: system writes disabled")
        return None

    try:
        return create_client(supabase_url, service_key)
    except Exception as e:
        logger.error(f"Supabase admin init error: {e}", exc_info=True)
        return None


# ============================================================
# Ping Supabase for health checks
# ============================================================

def ping_supabase() -> dict:
    """
    Connectivity check against the public tables.
    Anonymous reads return zero rows under RLS, which still proves
    the REST endpoint and schema are reachable.
    """
    client = get_supabase_client()
    if client is None:
        return {"service": "Supabase", "status": "not_configured"}

    results = {}
    for t in TABLES:
        try:
            res = client.table(t).select("id").limit(1).execute()
            results[t] = {"status": "ok", "rows_found": len(res.data or [])}
        except Exception as err:
            results[t] = {"status": "error", "detail": str(err)}

    overall = "ok" if all(r["status"] == "ok" for r in results.values()) else "degraded"
    return {"service": "Supabase", "status": overall, "tables": results}
