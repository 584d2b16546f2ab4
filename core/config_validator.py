# core/config_validator.py

from typing import List, Tuple

from core.config import settings
from core.logging_config import logger


# Notifications are written only by the service role, so its key is required too
REQUIRED_SETTINGS = (
    "SUPABASE_URL",
    "SUPABASE_ANON_KEY",
    "SUPABASE_SERVICE_ROLE_KEY",
)

# (setting name, what stops working without it)
RECOMMENDED_SETTINGS: Tuple[Tuple[str, str], ...] = (
    ("ADMIN_WEBHOOK_URL", "admins will not be alerted of new submissions"),
)


def missing_required_settings() -> List[str]:
    return [name for name in REQUIRED_SETTINGS if not getattr(settings, name, None)]


def missing_recommended_settings() -> List[str]:
    return [
        f"{name} ({consequence})"
        for name, consequence in RECOMMENDED_SETTINGS
        if not getattr(settings, name, None)
    ]


def validate_config_on_startup():
    """
    Fail fast when the registry cannot reach Supabase at all;
    only warn about settings that disable a side feature.
    """
    missing = missing_required_settings()
    if missing:
        message = f"Missing required environment variables: {', '.join(missing)}"
        logger.error(message)
        raise RuntimeError(message)

    for item in missing_recommended_settings():
        logger.warning(f"Optional configuration missing: {item}")

    logger.info(f"Configuration OK for {settings.ENV}")
