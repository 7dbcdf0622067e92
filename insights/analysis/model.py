"""
Generative model access for the widget analyst.

The chat model is built once at application start and handed to
WidgetAnalyst explicitly; nothing here keeps a module-level client.
"""
from typing import Any, Dict, List

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage
from langchain_core.output_parsers import StrOutputParser
from langchain_google_genai import ChatGoogleGenerativeAI

from ..integrations.langfuse import get_langfuse_config
from ..utils import ConfigurationError, ModelInvocationError, get_logger

logger = get_logger(__name__)


def build_chat_model(config: Dict[str, Any]) -> BaseChatModel:
    """
    Create the Gemini chat model from a GEMINI_CONFIG-shaped dict.

    Raises:
        ConfigurationError: if no API key is configured
    """
    if not config.get("api_key"):
        raise ConfigurationError("GEMINI_API_KEY is not set")

    return ChatGoogleGenerativeAI(
        model=config["model"],
        google_api_key=config["api_key"],
    )


class WidgetAnalyst:
    """
    Sends composed prompt segments to the chat model and returns its raw text.

    No retries, no streaming: one call, one completion.
    """

    _LANGFUSE_TAGS = ["widget_analyst"]

    def __init__(self, llm: BaseChatModel):
        self.llm = llm
        self.chain = self.llm | StrOutputParser()

    @staticmethod
    def to_messages(segments: List[str]) -> List[HumanMessage]:
        """One human message with one text part per segment, in order."""
        return [HumanMessage(content=[{"type": "text", "text": segment} for segment in segments])]

    async def generate(self, segments: List[str], user_id: int = 0) -> str:
        """
        Invoke the model with the given text segments.

        Args:
            segments: Ordered text segments (system prompt, context prompt)
            user_id: Requesting user, attached to traces when tracing is on

        Returns:
            The model's raw text completion

        Raises:
            ModelInvocationError: if the model call fails
        """
        config = get_langfuse_config(self._LANGFUSE_TAGS, "generate", user_id=str(user_id))
        try:
            result = await self.chain.ainvoke(self.to_messages(segments), config=config or None)
        except Exception as e:
            raise ModelInvocationError("Model invocation failed", details={"error": str(e)}) from e

        logger.info(f"WidgetAnalyst received {len(result)} characters from the model")
        return result
