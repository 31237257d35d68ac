"""
Configuration module for the AEGIS compliance service.

Centralizes all configuration with environment variable support
and validation.
"""

import os
from pathlib import Path
from typing import Dict

# ============================================================
# Environment Configuration
# ============================================================

ENV = os.getenv("AEGIS_ENV", "dev")  # dev|stage|prod

# Record store connection string (sqlite:///relative.db, sqlite:////abs.db or a bare path)
DEFAULT_DATABASE_URL = "sqlite:///data/aegis.db"

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "json")  # json|text
LOG_FILE = os.getenv("LOG_FILE") or None

# Certificate text
CERTIFICATE_ISSUER = os.getenv("CERTIFICATE_ISSUER", "AEGIS VERIFICATION CERTIFICATE")
VERIFICATION_PROTOCOL = os.getenv("VERIFICATION_PROTOCOL", "ISO/IEC 42001 (AI)")


class ConfigurationError(Exception):
    """Raised when a configuration value cannot be used."""


def database_url() -> str:
    """Current database connection string (read at call time so tests can override it)."""
    return os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)


def database_path(url: str = None) -> Path:
    """
    Resolve a database connection string to a SQLite file path.

    Raises:
        ConfigurationError: If the URL uses a scheme other than sqlite
    """
    url = url if url is not None else database_url()
    if "://" not in url:
        return Path(url)
    scheme, _, rest = url.partition("://")
    if scheme != "sqlite":
        raise ConfigurationError(f"unsupported database scheme: {scheme}")
    # sqlite:///rel.db -> "/rel.db" -> rel.db ; sqlite:////abs.db -> "//abs.db" -> /abs.db
    path = rest[1:] if rest.startswith("/") else rest
    if not path:
        raise ConfigurationError("database path is empty")
    return Path(path)


# ============================================================
# Validation
# ============================================================

def validate_config() -> Dict[str, bool]:
    """
    Validate that the configured database location is usable.
    Returns dict of check name -> ok.
    """
    try:
        path = database_path()
    except ConfigurationError:
        return {"database_url": False, "database_dir": False}
    # a missing directory is fine, the store creates it on first connect
    parent = path.parent
    return {
        "database_url": True,
        "database_dir": parent.is_dir() or not parent.exists(),
    }


# ============================================================
# Feature Flags
# ============================================================

def is_production() -> bool:
    """Check if running in production mode."""
    return ENV == "prod"


def is_debug() -> bool:
    """Check if debug mode is enabled."""
    return os.getenv("AEGIS_DEBUG", "").lower() in ("1", "true", "yes")
