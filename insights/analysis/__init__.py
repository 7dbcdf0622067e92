"""
Analysis Module

Widget analysis pipeline for CRM questions.

Submodules:
    - identity: user identity from the session cookie
    - aggregator: concurrent reads of leads, partners, products, orders
    - prompts: system and context prompt composition
    - model: Gemini chat model and the widget analyst
    - normalizer: fence stripping and JSON parsing of model output
    - service: the end-to-end pipeline
"""
from .identity import UserIdentity, parse_user_cookie, ANONYMOUS_USER_ID
from .aggregator import DataAggregator, SourceResult, SystemData, extract_records
from .prompts import PromptComposer, CONTEXT_SECTIONS
from .model import WidgetAnalyst, build_chat_model
from .normalizer import strip_code_fences, normalize_response, error_payload
from .service import AnalysisService

__all__ = [
    "UserIdentity",
    "parse_user_cookie",
    "ANONYMOUS_USER_ID",
    "DataAggregator",
    "SourceResult",
    "SystemData",
    "extract_records",
    "PromptComposer",
    "CONTEXT_SECTIONS",
    "WidgetAnalyst",
    "build_chat_model",
    "strip_code_fences",
    "normalize_response",
    "error_payload",
    "AnalysisService",
]
