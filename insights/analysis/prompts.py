"""
Prompt composition for the widget analyst.

The model receives two text segments: the fixed system instruction
(templates/system/widget_analyst.j2) and a context block built per request
(templates/analysis/context.j2) holding the system data and the question.
"""
from typing import Any, Dict, List, Optional

from templates import TemplateLoader, get_template_loader

from ..config import ANALYSIS_CONFIG
from .aggregator import SystemData

DEFAULT_RECORD_LIMIT = 50

# (title shown to the model, SystemData attribute)
CONTEXT_SECTIONS = [
    ("LEADS", "leads"),
    ("PARCEIROS/CLIENTES", "partners"),
    ("PRODUTOS", "products"),
    ("PEDIDOS", "orders"),
]


class PromptComposer:
    """
    Builds the system and context prompts sent to the model.

    Only the first `record_limit` records of each collection are serialized;
    the section header always reports the full collection size.
    Without explicit widget types the configured catalogue is offered.
    """

    def __init__(
        self,
        loader: Optional[TemplateLoader] = None,
        record_limit: int = DEFAULT_RECORD_LIMIT,
        widget_types: Optional[List[Dict[str, str]]] = None,
    ):
        self.loader = loader or get_template_loader()
        self.record_limit = record_limit
        self.widget_types = widget_types if widget_types is not None else ANALYSIS_CONFIG["widget_types"]

    def system_prompt(self) -> str:
        return self.loader.render_system_prompt("widget_analyst", widget_types=self.widget_types)

    def build_sections(self, data: SystemData) -> List[Dict[str, Any]]:
        sections = []
        for title, attr in CONTEXT_SECTIONS:
            records = getattr(data, attr)
            sections.append({
                "title": title,
                "total": len(records),
                "records": records[: self.record_limit],
            })
        return sections

    def context_prompt(self, data: SystemData, question: str) -> str:
        """
        Render the context block for one request.

        Args:
            data: Aggregated system data
            question: The user's natural-language question, inserted verbatim

        Returns:
            Context prompt string
        """
        return self.loader.render_analysis_prompt(
            "context",
            sections=self.build_sections(data),
            question=question,
        )

    def compose(self, data: SystemData, question: str) -> List[str]:
        """Return the ordered text segments: [system prompt, context prompt]."""
        return [self.system_prompt(), self.context_prompt(data, question)]
