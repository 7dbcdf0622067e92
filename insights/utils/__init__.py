"""
Utility modules for CRM Widget Insights.
"""
from .logging_config import get_logger, setup_logging
from .exceptions import InsightsError, ConfigurationError, ModelInvocationError, ModelOutputError

__all__ = [
    "get_logger",
    "setup_logging",
    "InsightsError",
    "ConfigurationError",
    "ModelInvocationError",
    "ModelOutputError",
]
