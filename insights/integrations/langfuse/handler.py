"""
LangFuse tracing of widget analyst model calls.

Settings come from TRACING_CONFIG (tracing section of settings.yaml, with
LANGFUSE_* environment overrides). Langfuse 3.x reads its credentials from
the environment, so configured values are exported there before use.
"""
import os
from typing import Optional, List

from ...utils import get_logger
from ...config import TRACING_CONFIG

logger = get_logger(__name__)

# Global client instance (lazy initialization)
_langfuse_client = None
_initialization_attempted = False
_env_configured = False


def _ensure_env_configured():
    """Ensure Langfuse environment variables are set from config."""
    global _env_configured
    if _env_configured:
        return

    # Langfuse 3.x reads from environment variables
    if TRACING_CONFIG.get("secret_key"):
        os.environ.setdefault("LANGFUSE_SECRET_KEY", TRACING_CONFIG["secret_key"])
    if TRACING_CONFIG.get("public_key"):
        os.environ.setdefault("LANGFUSE_PUBLIC_KEY", TRACING_CONFIG["public_key"])
    if TRACING_CONFIG.get("host"):
        os.environ.setdefault("LANGFUSE_HOST", TRACING_CONFIG["host"])

    _env_configured = True


def is_langfuse_enabled() -> bool:
    """Check if LangFuse is enabled and properly configured."""
    return bool(
        TRACING_CONFIG["enabled"]
        and TRACING_CONFIG["secret_key"]
        and TRACING_CONFIG["public_key"]
    )


def get_langfuse_client():
    """
    Get or create the global LangFuse client instance.
    Returns None if LangFuse is not enabled or the client cannot be created.
    """
    global _langfuse_client, _initialization_attempted

    if _initialization_attempted:
        return _langfuse_client

    _initialization_attempted = True

    if not is_langfuse_enabled():
        logger.info("LangFuse is disabled or not configured")
        return None

    _ensure_env_configured()

    from langfuse import Langfuse

    try:
        _langfuse_client = Langfuse()
        logger.info(f"LangFuse client initialized (host: {TRACING_CONFIG['host']})")
    except Exception as e:
        logger.error(f"Failed to initialize LangFuse client: {e}")
        _langfuse_client = None
    return _langfuse_client


def get_langfuse_handler():
    """
    Get a LangFuse CallbackHandler for LangChain tracing.

    Returns:
        CallbackHandler instance or None if LangFuse is not enabled
    """
    if not is_langfuse_enabled():
        return None

    _ensure_env_configured()

    from langfuse.langchain import CallbackHandler

    try:
        return CallbackHandler()
    except Exception as e:
        logger.error(f"Failed to create LangFuse handler: {e}")
        return None


def get_langfuse_config(
    tags: List[str],
    operation: Optional[str] = None,
    user_id: Optional[str] = None,
) -> dict:
    """
    Build a LangChain run config carrying LangFuse tracing, if enabled.

    Trace attributes are passed through run metadata (Langfuse 3.x reads
    `langfuse_user_id` and `langfuse_tags` from it).

    Args:
        tags: Component tags, appended to the configured tracing tags
        operation: Optional operation name, added as an "op:xxx" tag
        user_id: Optional user identifier attached to the trace

    Returns:
        Run config dict, empty when tracing is disabled
    """
    if not is_langfuse_enabled():
        return {}

    handler = get_langfuse_handler()
    if handler is None:
        return {}

    all_tags = list(TRACING_CONFIG["tags"])
    all_tags.extend(tag for tag in tags if tag not in all_tags)
    if operation:
        all_tags.append(f"op:{operation}")

    metadata = {"langfuse_tags": all_tags}
    if user_id:
        metadata["langfuse_user_id"] = user_id

    return {"callbacks": [handler], "metadata": metadata}


def flush_langfuse():
    """Flush any pending LangFuse events. Call this before application shutdown."""
    client = get_langfuse_client()
    if client:
        try:
            client.flush()
        except Exception as e:
            logger.warning(f"LangFuse flush failed: {e}")
