"""
Configuration module for the finance client.
"""
from .settings import (
    FinanceClientConfig,
    get_config,
    load_config,
    reload_config
)

__all__ = [
    'FinanceClientConfig',
    'get_config',
    'load_config',
    'reload_config'
]
