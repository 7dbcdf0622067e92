"""
Templates Module

This module provides Jinja2 template loading and rendering for prompts,
as well as centralized settings management via settings.yaml.

Templates are organized by category:
- system: System prompts (widget analyst instructions)
- analysis: Per-request prompts (system data context + user question)

Settings:
- settings.yaml: Centralized configuration for all tunable parameters
"""

from .template_loader import (
    TemplateLoader,
    get_template_loader,
    get_settings,
    get_setting,
    pretty_json,
)

__all__ = [
    "TemplateLoader",
    "get_template_loader",
    "get_settings",
    "get_setting",
    "pretty_json",
]
