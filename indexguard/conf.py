"""Process-wide engine wiring driven by Django settings."""

from __future__ import annotations

import logging
from functools import lru_cache

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from .engine import duplicates
from .engine.config import EngineConfig, load_config
from .services import DjangoCatalog

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_engine_config() -> EngineConfig:
    """Load the engine configuration once per process."""

    path = getattr(settings, 'INDEXGUARD_CONFIG_PATH', None) or None
    if path:
        logger.info("Loading indexing engine configuration from %s", path)
    return load_config(path)


def get_hash_store() -> duplicates.ContentHashStore:
    """Return the content hash store selected by ``INDEXGUARD_HASH_STORE``."""

    backend = getattr(settings, 'INDEXGUARD_HASH_STORE', 'memory')
    if backend == 'memory':
        return duplicates.get_default_store()
    if backend == 'cache':
        return duplicates.CacheHashStore(getattr(settings, 'INDEXGUARD_HASH_CACHE', 'default'))
    raise ImproperlyConfigured(f'Unsupported INDEXGUARD_HASH_STORE: {backend}')


def get_catalog() -> DjangoCatalog:
    return DjangoCatalog()


def get_base_url() -> str:
    return getattr(settings, 'SITE_BASE_URL', '').rstrip('/')
