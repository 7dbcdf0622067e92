"""
Request-scoped access to objects built at application start.
"""
from fastapi import Request

from insights.analysis import AnalysisService


def get_analysis_service(request: Request) -> AnalysisService:
    """Return the AnalysisService stored on the application state."""
    return request.app.state.analysis_service
