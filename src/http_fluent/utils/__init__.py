"""Utility modules for http-fluent."""

from .sanitizer import (
    mask_sensitive_data,
    mask_url,
    mask_headers,
    is_sensitive_key,
    add_sensitive_keys,
    remove_sensitive_keys,
    get_sensitive_keys,
)

__all__ = [
    'mask_sensitive_data',
    'mask_url',
    'mask_headers',
    'is_sensitive_key',
    'add_sensitive_keys',
    'remove_sensitive_keys',
    'get_sensitive_keys',
]
