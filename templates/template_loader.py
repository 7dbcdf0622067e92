"""
Jinja2 Template Loader for prompt management.

Provides utilities to load and render Jinja2 templates from the templates folder.
Also supports loading settings from settings.yaml for centralized configuration.
"""

import json
from pathlib import Path
from typing import Dict, Any, Optional

import yaml
from jinja2 import Environment, FileSystemLoader, select_autoescape, TemplateNotFound

# Template directory root
TEMPLATE_ROOT = Path(__file__).parent

# Settings cache
_settings_cache: Optional[Dict[str, Any]] = None
_settings_mtime: float = 0


def pretty_json(value: Any) -> str:
    """Serialize a value as two-space indented JSON, keeping non-ASCII text readable."""
    return json.dumps(value, indent=2, ensure_ascii=False)


class TemplateLoader:
    """
    Loads and renders Jinja2 templates for prompts.

    Usage:
        loader = TemplateLoader()
        prompt = loader.render("analysis/context.j2", sections=[...], question="...")
    """

    def __init__(self, template_dir: Optional[Path] = None):
        """
        Initialize the template loader.

        Args:
            template_dir: Root directory for templates. Defaults to templates folder.
        """
        self.template_dir = template_dir or TEMPLATE_ROOT
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape(enabled_extensions=(), default=False),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=False,
        )
        self.env.filters["pretty_json"] = pretty_json

    def render(self, template_path: str, **kwargs) -> str:
        """
        Render a template with the given variables.

        Args:
            template_path: Relative path to template (e.g., "system/widget_analyst.j2")
            **kwargs: Variables to pass to the template

        Returns:
            Rendered template string
        """
        try:
            template = self.env.get_template(template_path)
            return template.render(**kwargs)
        except TemplateNotFound:
            raise FileNotFoundError(f"Template not found: {template_path}")

    def render_system_prompt(self, prompt_name: str, **kwargs) -> str:
        """
        Render a system prompt template.

        Args:
            prompt_name: Name of the system prompt (e.g., "widget_analyst")
            **kwargs: Variables to pass to the template

        Returns:
            Rendered prompt string
        """
        template_path = f"system/{prompt_name}.j2"
        return self.render(template_path, **kwargs)

    def render_analysis_prompt(self, prompt_name: str, **kwargs) -> str:
        """
        Render an analysis prompt template.

        Args:
            prompt_name: Name of the analysis prompt (e.g., "context")
            **kwargs: Variables to pass to the template

        Returns:
            Rendered prompt string
        """
        template_path = f"analysis/{prompt_name}.j2"
        return self.render(template_path, **kwargs)

    def template_exists(self, template_path: str) -> bool:
        """
        Check if a template exists.

        Args:
            template_path: Relative path to template

        Returns:
            True if template exists
        """
        full_path = self.template_dir / template_path
        return full_path.exists()


# Singleton instance
_loader_instance: Optional[TemplateLoader] = None


def get_template_loader() -> TemplateLoader:
    """
    Get the singleton TemplateLoader instance.

    Returns:
        TemplateLoader instance
    """
    global _loader_instance

    if _loader_instance is None:
        _loader_instance = TemplateLoader()

    return _loader_instance


def get_settings(reload: bool = False) -> Dict[str, Any]:
    """
    Load settings from settings.yaml.

    Settings are cached and only reloaded if the file has been modified
    or if reload=True is specified.

    Args:
        reload: Force reload settings from file

    Returns:
        Settings dictionary

    Raises:
        FileNotFoundError: If settings.yaml doesn't exist
    """
    global _settings_cache, _settings_mtime

    settings_path = TEMPLATE_ROOT / "settings.yaml"

    if not settings_path.exists():
        raise FileNotFoundError(f"Settings file not found: {settings_path}")

    # Check if file has been modified
    current_mtime = settings_path.stat().st_mtime

    if _settings_cache is None or reload or current_mtime > _settings_mtime:
        with open(settings_path, 'r', encoding='utf-8') as f:
            _settings_cache = yaml.safe_load(f) or {}
        _settings_mtime = current_mtime

    return _settings_cache


def get_setting(key_path: str, default: Any = None) -> Any:
    """
    Get a specific setting value using dot notation.

    Args:
        key_path: Dot-separated path to the setting (e.g., "services.page_size")
        default: Default value if setting not found

    Returns:
        Setting value or default

    Example:
        page_size = get_setting("services.page_size", 100)
        model = get_setting("llm.model", "gemini-2.0-flash-exp")
    """
    try:
        settings = get_settings()
    except FileNotFoundError:
        return default

    value = settings
    for key in key_path.split("."):
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default
    return value
