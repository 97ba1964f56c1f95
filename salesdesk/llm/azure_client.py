import logging
from typing import List, Dict, Any
from langchain_openai import AzureChatOpenAI
from langchain_core.callbacks import BaseCallbackHandler
from langchain_core.messages import BaseMessage

from config.settings import get_settings

logger = logging.getLogger(__name__)


class LoggingCallbackHandler(BaseCallbackHandler):
    """Log LLM calls"""

    def on_llm_start(self, serialized: Dict[str, Any], prompts: List[str], **kwargs):
        logger.debug(f"LLM Start - Prompts: {str(prompts)[:100]}...")

    def on_chat_model_start(self, serialized: Dict[str, Any], messages: List[List[BaseMessage]], **kwargs):
        logger.debug(f"Chat model start - {sum(len(m) for m in messages)} messages")

    def on_llm_end(self, response, **kwargs):
        logger.debug(f"LLM End - Response: {str(response)[:100]}...")

    def on_llm_error(self, error: BaseException, **kwargs):
        logger.error(f"LLM Error: {error}")


class AzureOpenAIClient:
    """Azure OpenAI chat model wrapper"""

    def __init__(self, temperature: float = 0.0):
        self.settings = get_settings().azure_openai
        self.temperature = temperature
        self._llm = None

    @property
    def llm(self) -> AzureChatOpenAI:
        """Lazily built chat model"""
        if self._llm is None:
            self._llm = AzureChatOpenAI(
                azure_deployment=self.settings.deployment,
                api_key=self.settings.api_key,
                api_version=self.settings.api_version,
                azure_endpoint=self.settings.endpoint,
                temperature=self.temperature,
                callbacks=[LoggingCallbackHandler()]
            )
            logger.info(f"Azure OpenAI client initialized with deployment: {self.settings.deployment}")
        return self._llm

    def chat(self, messages: List[BaseMessage]) -> str:
        """Send chat messages, return the reply text"""
        try:
            response = self.llm.invoke(messages)
            return response.content
        except Exception as e:
            logger.error(f"Chat failed: {e}")
            raise
