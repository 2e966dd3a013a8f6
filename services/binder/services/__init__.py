"""
Services package.

Provides the adapters between Starlette requests and the binding engine.
"""

from .context_factory import build_input_context

__all__ = [
    "build_input_context",
]
