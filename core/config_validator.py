# core/config_validator.py

from typing import List, Optional
from core.config import Settings, settings as default_settings
from core.logging_config import logger


def validate_required_config(settings: Optional[Settings] = None) -> List[str]:
    """
    Validate that all required environment variables are set.
    Returns list of missing required variables.
    """
    settings = settings or default_settings
    missing = []

    if not settings.SUPABASE_URL:
        missing.append("SUPABASE_URL")
    if not settings.SUPABASE_SERVICE_ROLE_KEY:
        missing.append("SUPABASE_SERVICE_ROLE_KEY")

    return missing


def validate_optional_config(settings: Optional[Settings] = None) -> List[str]:
    """
    Optional but recommended configuration (warnings only).
    """
    settings = settings or default_settings
    warnings = []

    if not settings.SUPABASE_ANON_KEY:
        warnings.append("SUPABASE_ANON_KEY (optional but recommended)")

    # Nobody can reach /super-admin without at least one address
    if not settings.super_admin_emails:
        warnings.append("SUPER_ADMIN_EMAILS (no super admins configured)")
    if not settings.admin_emails:
        warnings.append("ADMIN_EMAILS")

    return warnings


def validate_config_on_startup(settings: Optional[Settings] = None):
    """
    Raises RuntimeError if critical config is missing.
    Logs warnings for optional config.
    """
    missing_required = validate_required_config(settings)
    missing_optional = validate_optional_config(settings)

    if missing_required:
        error_msg = f"Missing required environment variables: {', '.join(missing_required)}"
        logger.error(error_msg)
        raise RuntimeError(error_msg)

    for warning in missing_optional:
        logger.warning(f"Optional configuration missing: {warning}")

    logger.info("Configuration validation passed")
