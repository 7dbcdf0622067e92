"""
Custom exceptions for CRM Widget Insights.
Every failure that reaches the analysis endpoint is one of these (or a library error).
"""


class InsightsError(Exception):
    """Base exception for all CRM Widget Insights errors."""
    
    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)
    
    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(InsightsError):
    """Raised when there's a configuration issue."""
    pass


class ModelInvocationError(InsightsError):
    """Raised when the generative model call fails."""
    pass


class ModelOutputError(InsightsError):
    """Raised when the model output cannot be parsed as JSON."""
    pass
