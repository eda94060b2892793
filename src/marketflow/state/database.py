"""Global database backend instance."""

from functools import lru_cache

from .backends import DatabaseBackend, create_backend


@lru_cache
def get_database() -> DatabaseBackend:
    """Get cached database backend from settings.

    Returns a singleton DatabaseBackend configured from the DATABASE_URL
    setting.
    """
    from marketflow.config import get_settings

    return create_backend(get_settings().database_url)


def reset_database() -> None:
    """Close and forget the cached backend. Useful for testing."""
    if get_database.cache_info().currsize:
        get_database().close()
    get_database.cache_clear()
