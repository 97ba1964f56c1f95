from langchain_core.prompts import ChatPromptTemplate, MessagesPlaceholder


class PromptManager:
    """Prompt templates"""

    SYSTEM_PROMPTS = {
        "sales_assistant": """คุณคือผู้ช่วย AI ของร้าน มีหน้าที่ตอบคำถามจากข้อมูลการขายของร้าน

ข้อมูลการขายสรุป:
{sales_context}

แนวทางการตอบ:
- ตอบเป็นภาษาไทย กระชับ และใช้ตัวเลขจากข้อมูลด้านบนเท่านั้น
- แสดงจำนวนเงินเป็นบาท พร้อมตัวคั่นหลักพัน
- หากข้อมูลไม่เพียงพอที่จะตอบ ให้บอกตรง ๆ ว่าไม่มีข้อมูล ห้ามเดาตัวเลข""",
    }

    EXAMPLE_QUESTIONS = [
        "ยอดขายเดือนล่าสุดเท่าไหร่?",
        "ยอดขายรวมทั้งหมด",
        "สินค้าไหนขายดีที่สุด?",
        "ลูกค้าคนไหนซื้อเยอะที่สุด?",
    ]

    @classmethod
    def get_chat_prompt(cls, prompt_type: str = "sales_assistant") -> ChatPromptTemplate:
        """System prompt, chat history, then the question"""
        system_prompt = cls.SYSTEM_PROMPTS.get(prompt_type)

        if not system_prompt:
            raise ValueError(f"Unknown prompt type: {prompt_type}")

        return ChatPromptTemplate.from_messages([
            ("system", system_prompt),
            MessagesPlaceholder(variable_name="chat_history"),
            ("human", "{question}")
        ])
