"""
Configuration - centralized settings for CRM Widget Insights.

Configuration sources:
    - templates/settings.yaml: tunable parameters (model, services, analysis, logging)
    - templates/system/*.j2, templates/analysis/*.j2: prompt templates
    - Environment variables (.env): API keys and deployment-specific values

Environment variables:
    Read after loading a .env file, and take precedence over settings.yaml:
    - GEMINI_API_KEY: generative model API key
    - GEMINI_MODEL: generative model identifier
    - APP_BASE_URL: base URL of the internal services (leads, Sankhya listings)
    - LOG_LEVEL: logging level name
    - CORS_ORIGINS: comma-separated list of allowed browser origins
    - LANGFUSE_ENABLED, LANGFUSE_HOST: override tracing.enabled / tracing.host
    - LANGFUSE_SECRET_KEY, LANGFUSE_PUBLIC_KEY: tracing credentials
"""
import os
from pathlib import Path
from typing import List, Dict, Any, Optional

from dotenv import load_dotenv

from templates import get_setting, get_template_loader

# Load variables from a .env file, if present
load_dotenv()


def _env_list(name: str, default: List[str]) -> List[str]:
    """Split a comma-separated environment variable into a list."""
    raw = os.getenv(name)
    if not raw:
        return default
    return [item.strip() for item in raw.split(",") if item.strip()]


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def get_system_prompt(prompt_name: str, **kwargs) -> str:
    """
    Render a system prompt template by name.

    Args:
        prompt_name: Name of the system prompt (e.g., "widget_analyst")
        **kwargs: Variables to pass to the template

    Returns:
        Rendered system prompt string
    """
    return get_template_loader().render_system_prompt(prompt_name, **kwargs)


def get_analysis_prompt(prompt_name: str, **kwargs) -> str:
    """
    Render an analysis prompt template by name.

    Args:
        prompt_name: Name of the analysis prompt (e.g., "context")
        **kwargs: Variables to pass to the template

    Returns:
        Rendered prompt string
    """
    return get_template_loader().render_analysis_prompt(prompt_name, **kwargs)


# =============================================================================
# Project Paths
# =============================================================================
PROJECT_ROOT = Path(__file__).parent.parent

# =============================================================================
# LLM Configuration - settings.yaml, environment takes precedence
# =============================================================================
GEMINI_CONFIG = {
    "model": os.getenv("GEMINI_MODEL") or get_setting("llm.model", "gemini-2.0-flash-exp"),
    "api_key": os.getenv("GEMINI_API_KEY", ""),
}

# =============================================================================
# Internal Services Configuration
# =============================================================================
_timeout: Optional[float] = get_setting("services.timeout", None)

SERVICES_CONFIG: Dict[str, Any] = {
    "base_url": os.getenv("APP_BASE_URL") or get_setting("services.base_url", "http://localhost:5000"),
    "page": int(get_setting("services.page", 1)),
    "page_size": int(get_setting("services.page_size", 100)),
    "timeout": float(_timeout) if _timeout is not None else None,
    "endpoints": {
        "leads": get_setting("services.endpoints.leads", "/api/leads"),
        "partners": get_setting("services.endpoints.partners", "/api/sankhya/parceiros"),
        "products": get_setting("services.endpoints.products", "/api/sankhya/produtos"),
        "orders": get_setting("services.endpoints.orders", "/api/sankhya/pedidos/listar"),
    },
}

# =============================================================================
# Analysis Configuration
# =============================================================================
DEFAULT_WIDGET_TYPES = [
    {"name": "card", "description": "Para métricas principais (valor, variação, subtítulo)"},
    {"name": "grafico_barras", "description": "Para comparações (labels, values)"},
    {"name": "grafico_linha", "description": "Para tendências temporais (labels, values)"},
    {"name": "grafico_pizza", "description": "Para distribuições (labels, values)"},
    {"name": "tabela", "description": "Para dados detalhados (colunas, linhas)"},
]

ANALYSIS_CONFIG: Dict[str, Any] = {
    "context_record_limit": int(get_setting("analysis.context_record_limit", 50)),
    "error_message": get_setting("analysis.error_message", "Erro ao processar análise"),
    "widget_types": get_setting("analysis.widget_types", DEFAULT_WIDGET_TYPES),
}

# =============================================================================
# Logging Configuration
# =============================================================================
_log_file = get_setting("logging.file", None)

LOGGING_CONFIG = {
    "level": os.getenv("LOG_LEVEL") or get_setting("logging.level", "INFO"),
    "file": PROJECT_ROOT / _log_file if _log_file else None,
}

# =============================================================================
# Tracing Configuration - LangFuse keys only come from the environment
# =============================================================================
TRACING_CONFIG = {
    "enabled": _env_flag("LANGFUSE_ENABLED", bool(get_setting("tracing.enabled", False))),
    "host": os.getenv("LANGFUSE_HOST") or get_setting("tracing.host", "https://cloud.langfuse.com"),
    "secret_key": os.getenv("LANGFUSE_SECRET_KEY", ""),
    "public_key": os.getenv("LANGFUSE_PUBLIC_KEY", ""),
    "tags": get_setting("tracing.tags", ["insights"]),
}

# =============================================================================
# API Configuration
# =============================================================================
CORS_ORIGINS = _env_list("CORS_ORIGINS", [
    "http://localhost:5000",
    "http://localhost:3000",
    "http://127.0.0.1:5000",
])

APP_TITLE = "CRM Widget Insights"
