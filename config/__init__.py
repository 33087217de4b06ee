"""
Config module - Deployment defaults, overridable from .env and the CLI.
"""

from .settings import DEFAULT_SETTINGS, PROXY_ENV_VARS, DATAVERSE_SAMPLE_CLIENT_ID

__all__ = [
    'DEFAULT_SETTINGS',
    'PROXY_ENV_VARS',
    'DATAVERSE_SAMPLE_CLIENT_ID',
]
