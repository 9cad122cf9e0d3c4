"""
Tenant store loader.

This module loads the configured TenantStore from settings.

Usage:
    from stockflow.adapters import get_tenant_store

    store = get_tenant_store()
    record = store.find_by_login_id("alice")

Settings:
    STOCKFLOW = {
        "TENANT_STORE": "stockflow.adapters.django_auth.DjangoUserTenantStore",
    }

If TENANT_STORE is not configured, get_tenant_store() raises ImproperlyConfigured.
"""

from __future__ import annotations

import logging
import threading

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.utils.module_loading import import_string

from stockflow.protocols.tenants import TenantStore

logger = logging.getLogger(__name__)


# Cached store instance
_lock = threading.Lock()
_tenant_store: TenantStore | None = None


def get_tenant_store() -> TenantStore:
    """
    Return the configured tenant store.

    Returns:
        TenantStore instance

    Raises:
        ImproperlyConfigured: If TENANT_STORE is not configured, fails to import
            or does not implement the TenantStore protocol
    """
    global _tenant_store

    if _tenant_store is None:
        with _lock:
            if _tenant_store is None:  # double-checked
                stockflow_settings = getattr(settings, "STOCKFLOW", {})
                store_path = stockflow_settings.get("TENANT_STORE")

                if not store_path:
                    raise ImproperlyConfigured(
                        "STOCKFLOW['TENANT_STORE'] must be configured. "
                        "Example: 'stockflow.adapters.django_auth.DjangoUserTenantStore'"
                    )

                try:
                    store_class = import_string(store_path)
                except ImportError as e:
                    raise ImproperlyConfigured(
                        f"Failed to import tenant store '{store_path}': {e}"
                    ) from e

                store = store_class()
                if not isinstance(store, TenantStore):
                    raise ImproperlyConfigured(
                        f"'{store_path}' does not implement the TenantStore protocol"
                    )
                _tenant_store = store
                logger.debug("Loaded tenant store: %s", store_path)

    return _tenant_store


def reset_tenant_store() -> None:
    """Reset the cached store. Useful for testing."""
    global _tenant_store
    _tenant_store = None
