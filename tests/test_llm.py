from datetime import datetime

import pytest
from unittest.mock import Mock, patch
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage
from salesdesk.llm.azure_client import AzureOpenAIClient
from salesdesk.llm.assistant import SalesAssistant, to_langchain_messages
from salesdesk.llm.prompts import PromptManager
from salesdesk.data.models import ChatMessage, SaleRecord


def azure_settings():
    return Mock(
        api_key='test-key',
        endpoint='https://test.openai.azure.com/',
        deployment='gpt-4o',
        api_version='2024-06-01'
    )


class TestAzureOpenAIClient:
    """Azure OpenAI client"""

    @patch('salesdesk.llm.azure_client.get_settings')
    def test_client_initialization(self, mock_settings):
        mock_settings.return_value.azure_openai = azure_settings()

        client = AzureOpenAIClient(temperature=0.5)

        assert client.temperature == 0.5
        assert client._llm is None  # built lazily

    @patch('salesdesk.llm.azure_client.AzureChatOpenAI')
    @patch('salesdesk.llm.azure_client.get_settings')
    def test_llm_built_from_settings(self, mock_settings, mock_llm_class):
        mock_settings.return_value.azure_openai = azure_settings()

        client = AzureOpenAIClient()
        llm = client.llm

        assert llm is client.llm
        mock_llm_class.assert_called_once()
        kwargs = mock_llm_class.call_args.kwargs
        assert kwargs['azure_deployment'] == 'gpt-4o'
        assert kwargs['azure_endpoint'] == 'https://test.openai.azure.com/'

    @patch('salesdesk.llm.azure_client.AzureChatOpenAI')
    @patch('salesdesk.llm.azure_client.get_settings')
    def test_chat_returns_reply_text(self, mock_settings, mock_llm_class):
        mock_settings.return_value.azure_openai = azure_settings()

        mock_llm = Mock()
        mock_llm.invoke.return_value = Mock(content="คำตอบ")
        mock_llm_class.return_value = mock_llm

        messages = [SystemMessage(content="ระบบ"), HumanMessage(content="คำถาม")]
        result = AzureOpenAIClient().chat(messages)

        assert result == "คำตอบ"
        mock_llm.invoke.assert_called_once_with(messages)

    @patch('salesdesk.llm.azure_client.AzureChatOpenAI')
    @patch('salesdesk.llm.azure_client.get_settings')
    def test_chat_errors_propagate(self, mock_settings, mock_llm_class):
        mock_settings.return_value.azure_openai = azure_settings()
        mock_llm_class.return_value.invoke.side_effect = RuntimeError("unauthorized")

        client = AzureOpenAIClient()

        with pytest.raises(RuntimeError):
            client.chat([HumanMessage(content="คำถาม")])


class TestPromptManager:
    """Prompt templates"""

    def test_unknown_prompt(self):
        with pytest.raises(ValueError):
            PromptManager.get_chat_prompt("daily_report")

    def test_chat_prompt_layout(self):
        prompt = PromptManager.get_chat_prompt()
        messages = prompt.format_messages(
            sales_context="ยอดขายรวมทั้งหมด: 1,000 บาท",
            chat_history=[],
            question="ยอดขายรวม?"
        )

        assert isinstance(messages[0], SystemMessage)
        assert "ยอดขายรวมทั้งหมด: 1,000 บาท" in messages[0].content
        assert messages[-1].content == "ยอดขายรวม?"


class TestSalesAssistant:
    """Sales assistant"""

    @pytest.fixture
    def records(self):
        return [
            SaleRecord(sale_date=datetime(2024, 5, 1), buyer_phone='0811111111', buyer_name='สมชาย',
                       product_name='ลิปบาล์ม', quantity=2, price=258.0, seller_name='แอน'),
            SaleRecord(sale_date=datetime(2024, 6, 1), product_name='โฟมล้างหน้า', quantity=1, price=250.0),
        ]

    def test_history_roles(self):
        history = [
            ChatMessage(role='user', content='สวัสดี'),
            ChatMessage(role='assistant', content='สวัสดีครับ'),
        ]

        messages = to_langchain_messages(history)

        assert isinstance(messages[0], HumanMessage)
        assert isinstance(messages[1], AIMessage)

    def test_answer_sends_context_history_and_question(self, records):
        llm_client = Mock()
        llm_client.chat.return_value = "ยอดขายรวม 508 บาท"
        assistant = SalesAssistant(records, llm_client=llm_client)

        history = [ChatMessage(role='user', content='ก่อนหน้า'), ChatMessage(role='assistant', content='ตอบ')]
        answer = assistant.answer("ยอดขายรวมทั้งหมด", history)

        assert answer == "ยอดขายรวม 508 บาท"
        messages = llm_client.chat.call_args[0][0]
        assert isinstance(messages[0], SystemMessage)
        assert "508" in messages[0].content
        assert [m.content for m in messages[1:3]] == ['ก่อนหน้า', 'ตอบ']
        assert isinstance(messages[-1], HumanMessage)
        assert messages[-1].content == "ยอดขายรวมทั้งหมด"

    @patch('salesdesk.llm.assistant.build_sales_context')
    def test_context_rebuilt_only_for_new_records(self, mock_build, records):
        mock_build.return_value = "context"
        assistant = SalesAssistant(llm_client=Mock())
        mock_build.reset_mock()

        assistant.set_records(records)
        assistant.set_records(records)
        assert mock_build.call_count == 1

        assistant.set_records(list(records))
        assert mock_build.call_count == 2

    def test_llm_client_created_lazily(self):
        with patch('salesdesk.llm.assistant.AzureOpenAIClient') as mock_client:
            assistant = SalesAssistant()
            mock_client.assert_not_called()

            assert assistant.llm_client is mock_client.return_value
