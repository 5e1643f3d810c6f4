"""Persistence adapters (read side of the provider records file)."""

from .json_store import JsonProvidersStore, ProviderRecord, default_store_path, is_valid_provider_id

__all__ = ["JsonProvidersStore", "ProviderRecord", "default_store_path", "is_valid_provider_id"]
