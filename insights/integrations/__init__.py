"""
Integrations Module

Integrations with external services.

Submodules:
    - langfuse: optional LangFuse tracing of model calls
"""
from . import langfuse

__all__ = ["langfuse"]
