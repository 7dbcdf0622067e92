"""
Analysis pipeline: aggregate → compose → generate → normalize.
"""
from typing import Any, Optional

from ..utils import ConfigurationError, get_logger
from .aggregator import DataAggregator
from .model import WidgetAnalyst
from .normalizer import normalize_response
from .prompts import PromptComposer

logger = get_logger(__name__)


class AnalysisService:
    """
    Runs one analysis request end to end.

    `analyst` is None when the model could not be configured at startup;
    every request then fails with ConfigurationError.
    """

    def __init__(
        self,
        aggregator: DataAggregator,
        composer: PromptComposer,
        analyst: Optional[WidgetAnalyst],
    ):
        self.aggregator = aggregator
        self.composer = composer
        self.analyst = analyst

    async def analyze(self, question: str, user_id: int) -> Any:
        """
        Answer a question with a widget payload.

        Args:
            question: The user's natural-language question
            user_id: User identifier from the session cookie (0 when anonymous)

        Returns:
            The parsed model payload, unmodified

        Raises:
            ConfigurationError: if no model is available
            ModelInvocationError: if the model call fails
            ModelOutputError: if the model output is not valid JSON
        """
        if self.analyst is None:
            raise ConfigurationError("Generative model is not configured")

        data = await self.aggregator.aggregate(user_id)
        segments = self.composer.compose(data, question)
        logger.info(f"Analyzing question for user {user_id}: {question[:50]}...")

        raw = await self.analyst.generate(segments, user_id=user_id)
        return normalize_response(raw)
