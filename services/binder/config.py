"""
Binder configuration definition.

Loads configuration from environment variables and provides a Pydantic model.
Uses pydantic-settings for type safety and defaults.
"""

import sys
from typing import Any, Dict

from pydantic import Field
from services.common.core.config import BaseAppConfig


class BinderConfig(BaseAppConfig):
    """
    Configuration management for the request binder service.
    """

    # Session (required from env)
    SESSION_SECRET_KEY: str = Field(..., min_length=32, description="Session cookie signing key")
    SESSION_COOKIE_NAME: str = Field(default="session", description="Session cookie name")
    SESSION_MAX_AGE: int = Field(default=14 * 24 * 60 * 60, description="Session lifetime (seconds)")

    # Request attributes applied when an upstream layer did not set them
    DEFAULT_REQUEST_ATTRIBUTES: Dict[str, Any] = Field(
        default_factory=lambda: {"customAttribute": "DefaultCustomAttribute"},
        description="Default request attributes (JSON object)",
    )

    # Binding rules
    HEADER_KEY_HYPHENATE: bool = Field(
        default=True,
        description="Derive header keys from field names with '-' for '_' (all target types)",
    )

    # FastAPI settings
    root_path: str = Field(default="", description="API root path (for proxy)")

    # model_config is inherited


# Load config as a singleton.
# pydantic-settings reads environment variables during instantiation.
try:
    config = BinderConfig()
except Exception as e:
    sys.stderr.write(f"Failed to load configuration: {e}\n")
    raise
