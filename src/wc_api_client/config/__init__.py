"""
Configuration management for the WooCommerce API Python client
"""

from .client_config import (
    ClientConfig,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_USER_AGENT,
    create_client_config,
    load_config_from_env,
    load_config_from_file,
)

__all__ = [
    'ClientConfig',
    'DEFAULT_CONNECT_TIMEOUT',
    'DEFAULT_USER_AGENT',
    'create_client_config',
    'load_config_from_env',
    'load_config_from_file',
]
