"""Utilities for viber00t."""

from .paths import cache_home, config_home, expand_home, state_home

__all__ = [
    'cache_home',
    'config_home',
    'expand_home',
    'state_home',
]
