import logging
from typing import List, Optional

from ..data.models import ChatMessage

logger = logging.getLogger(__name__)


class ChatSession:
    """Password-gated conversation with the sales assistant"""

    def __init__(self, assistant, chat_password: str = None):
        if chat_password is None:
            from config.settings import get_settings
            chat_password = get_settings().app.chat_password

        self.assistant = assistant
        self.chat_password = chat_password
        self.password = ''
        self.messages: List[ChatMessage] = []
        self.is_loading = False
        self.error: Optional[str] = None

    @property
    def is_unlocked(self) -> bool:
        # plain comparison; this gate only hides the page
        return bool(self.chat_password) and self.password == self.chat_password

    def set_password(self, password: str):
        self.password = password or ''

    def send_message(self, text: str) -> Optional[str]:
        """Ask the assistant; returns the reply or None when nothing was sent"""
        if not self.is_unlocked:
            logger.warning("Chat message ignored: chat is locked")
            return None
        if self.is_loading or not text or not text.strip():
            return None

        history = list(self.messages)
        self.messages.append(ChatMessage(role='user', content=text))
        self.is_loading = True
        self.error = None

        try:
            reply = self.assistant.answer(text, history)
        except Exception as e:
            logger.error(f"Assistant reply failed: {e}", exc_info=True)
            self.error = f"ขออภัย ไม่สามารถติดต่อผู้ช่วย AI ได้: {e}"
            # unanswered question is not kept as history
            self.messages.pop()
            return None
        finally:
            self.is_loading = False

        self.messages.append(ChatMessage(role='assistant', content=reply))
        return reply

    def reset(self):
        """Start a new conversation"""
        self.messages = []
        self.error = None
