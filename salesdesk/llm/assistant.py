import logging
from typing import List, Optional, Sequence
from langchain_core.messages import BaseMessage, HumanMessage, AIMessage

from .azure_client import AzureOpenAIClient
from .prompts import PromptManager
from ..analytics.summary import build_sales_context
from ..data.models import ChatMessage, SaleRecord

logger = logging.getLogger(__name__)


def to_langchain_messages(history: Sequence[ChatMessage]) -> List[BaseMessage]:
    """Chat turns as langchain messages"""
    messages = []
    for message in history:
        if message.role == 'user':
            messages.append(HumanMessage(content=message.content))
        else:
            messages.append(AIMessage(content=message.content))
    return messages


class SalesAssistant:
    """Answers questions about the sales data"""

    def __init__(self, records: Optional[Sequence[SaleRecord]] = None, llm_client: AzureOpenAIClient = None):
        self._llm_client = llm_client
        self.prompt = PromptManager.get_chat_prompt("sales_assistant")
        self._records = None
        self.sales_context = build_sales_context(None)
        self.set_records(records)

    @property
    def llm_client(self) -> AzureOpenAIClient:
        if self._llm_client is None:
            self._llm_client = AzureOpenAIClient(temperature=0.3)
        return self._llm_client

    def set_records(self, records: Optional[Sequence[SaleRecord]]):
        """Rebuild the data summary when the record list changes"""
        if records is self._records:
            return
        self._records = records
        self.sales_context = build_sales_context(records)
        logger.info(f"Sales context rebuilt from {len(records or [])} records")

    def answer(self, question: str, history: Sequence[ChatMessage] = ()) -> str:
        """Reply to one question given the earlier turns"""
        logger.info(f"Assistant question: {question[:100]}")
        messages = self.prompt.format_messages(
            sales_context=self.sales_context,
            chat_history=to_langchain_messages(history),
            question=question
        )
        return self.llm_client.chat(messages)
