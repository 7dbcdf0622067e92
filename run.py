#!/usr/bin/env python
"""
CRM Widget Insights Launcher

Starts the FastAPI backend server.

Usage:
    1. Set GEMINI_API_KEY and APP_BASE_URL (or put them in .env)
    2. Run: python run.py
    3. POST {"prompt": "..."} to http://localhost:8000/api/gemini/analise

API docs:
    http://localhost:8000/docs (Swagger UI)
    http://localhost:8000/redoc (ReDoc)
"""
import sys
from pathlib import Path

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent))

import uvicorn

if __name__ == "__main__":
    print("Starting CRM Widget Insights API Server...")
    print("API docs available at: http://localhost:8000/docs")
    print("-" * 50)

    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        reload_dirs=["api", "insights", "templates"]
    )
