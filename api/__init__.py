"""
FastAPI Backend - CRM Widget Insights

API routes:
    - /api/gemini/analise: widget analysis for a CRM question
    - /api/health: health check
"""

__version__ = "1.0.0"
