"""
LangFuse integration module for CRM Widget Insights.
Provides optional tracing of the widget analyst model calls.
"""
from .handler import (
    get_langfuse_handler,
    get_langfuse_client,
    get_langfuse_config,
    is_langfuse_enabled,
    flush_langfuse,
)

__all__ = [
    "get_langfuse_handler",
    "get_langfuse_client",
    "get_langfuse_config",
    "is_langfuse_enabled",
    "flush_langfuse",
]
