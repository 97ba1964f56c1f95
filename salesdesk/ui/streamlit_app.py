import streamlit as st
import sys
import os

# project root on sys.path for `streamlit run`
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '../../')))

from config.settings import get_settings
from salesdesk.analytics.customers import DateWindow
from salesdesk.analytics.summary import monthly_spending
from salesdesk.engine.core import SalesDeskCore
from salesdesk.llm.prompts import PromptManager
from salesdesk.ui.components import (
    CustomerSummaryCard,
    SpendingChart,
    HistoryTable,
    SearchResultsList,
    PasswordGate,
    ChatWelcome,
    ChatInterface,
    format_timestamp
)

st.set_page_config(
    page_title="SalesDesk",
    page_icon="🛍️",
    layout="wide",
    initial_sidebar_state="expanded"
)

DATE_WINDOW_LABELS = {
    DateWindow.ALL: "ดูข้อมูลทั้งหมด",
    DateWindow.THREE_MONTHS: "ดูย้อนหลัง 3 เดือน",
}


class SalesDeskUI:
    """Dashboard UI"""

    def __init__(self):
        self.init_session_state()
        self.core: SalesDeskCore = st.session_state.core

    def init_session_state(self):
        """Initialise session state"""
        if 'current_page' not in st.session_state:
            st.session_state.current_page = 'chat'

        if 'core' not in st.session_state:
            core = SalesDeskCore()
            with st.spinner("กำลังโหลดข้อมูลการขาย..."):
                core.load_records()
            st.session_state.core = core

        if 'search_input' not in st.session_state:
            st.session_state.search_input = ''

    def run(self):
        """Render the current page"""
        self.render_sidebar()

        if st.session_state.current_page == 'chat':
            self.render_chat()
        elif st.session_state.current_page == 'sales_history':
            self.render_sales_history()

    def render_sidebar(self):
        with st.sidebar:
            st.title("🛍️ SalesDesk")
            st.markdown("---")

            st.subheader("เมนู")
            pages = {
                'chat': '💬 AI Chat',
                'sales_history': '📋 ประวัติการซื้อลูกค้า'
            }

            for page_id, page_name in pages.items():
                if st.button(page_name, use_container_width=True):
                    st.session_state.current_page = page_id

            st.markdown("---")

            st.subheader("ข้อมูล")
            records = self.core.records or []
            st.caption(f"{len(records):,} รายการขาย · {len(self.core.customers):,} ลูกค้า")
            st.caption(f"โหลดล่าสุด: {format_timestamp(self.core.state['last_loaded'])}")

            settings = get_settings()
            if not settings.data_source.use_mock and not settings.has_data_file():
                st.warning("ยังไม่ได้ตั้งค่าไฟล์ข้อมูลการขาย กำลังแสดงข้อมูลตัวอย่าง")
            if not settings.has_azure_openai():
                st.warning("ยังไม่ได้ตั้งค่า Azure OpenAI ผู้ช่วย AI จะตอบไม่ได้")

            if st.button("🔄 โหลดข้อมูลใหม่", use_container_width=True):
                with st.spinner("กำลังโหลดข้อมูลการขาย..."):
                    self.core.load_records()
                st.rerun()

    def render_chat(self):
        chat = self.core.chat

        if not chat.is_unlocked:
            PasswordGate(self._on_password_change, key='chat_password')
            return

        col1, col2 = st.columns([5, 1])
        with col1:
            st.title("💬 AI Chat")
        with col2:
            st.button("🆕 เริ่มบทสนทนาใหม่", on_click=chat.reset, disabled=not chat.messages,
                      use_container_width=True)

        if not chat.messages:
            ChatWelcome(PromptManager.EXAMPLE_QUESTIONS)

        ChatInterface(chat.messages, chat.send_message, chat.is_loading, chat.error)

    def render_sales_history(self):
        st.title("📋 ประวัติการซื้อลูกค้า")

        if self.core.state['error']:
            st.error(self.core.state['error'])
            return

        if self.core.records is None:
            return

        lookup = self.core.lookup

        with st.container(border=True):
            col1, col2, col3 = st.columns([6, 1, 1])

            with col1:
                st.text_input(
                    "ค้นหา",
                    key='search_input',
                    on_change=self._on_search_input,
                    placeholder="ค้นหาด้วยชื่อ, ชื่อ Facebook, หรือเบอร์โทรศัพท์...",
                    label_visibility="collapsed"
                )

            with col2:
                st.button(
                    "🔍 ค้นหา",
                    on_click=self._on_search,
                    disabled=not lookup.search_term.strip(),
                    use_container_width=True
                )

            with col3:
                st.button("🗑️", on_click=self._on_clear, help="ล้างข้อมูล", use_container_width=True)

            st.radio(
                "แสดงผล:",
                list(DateWindow),
                format_func=DATE_WINDOW_LABELS.get,
                index=list(DateWindow).index(lookup.date_window),
                key='date_window',
                on_change=self._on_date_window_change,
                horizontal=True
            )

        if lookup.selected:
            customer_records = self.core.selected_records()
            CustomerSummaryCard(lookup.selected)
            SpendingChart(monthly_spending(self.core.customer_history(lookup.selected.phone)))
            HistoryTable(customer_records, lookup.is_highlighted)

        elif lookup.results is not None and len(lookup.results) > 1:
            SearchResultsList(lookup.results, self._on_select_result)

        elif lookup.results is not None and len(lookup.results) == 0:
            st.info(f'ไม่พบข้อมูลลูกค้าที่ตรงกับ "{lookup.search_term}"')

    # Widget callbacks
    def _on_password_change(self):
        self.core.chat.set_password(st.session_state.chat_password)

    def _on_search_input(self):
        # Enter in the search box runs the search
        self.core.lookup.set_search_term(st.session_state.search_input)
        if self.core.lookup.search_term.strip():
            self.core.search()

    def _on_search(self):
        self.core.search(st.session_state.search_input)

    def _on_select_result(self, customer):
        self.core.lookup.select_result(customer)
        st.session_state.search_input = customer.name

    def _on_clear(self):
        self.core.lookup.clear()
        st.session_state.search_input = ''

    def _on_date_window_change(self):
        self.core.lookup.set_date_window(st.session_state.date_window)


def main():
    """Run the Streamlit app"""
    app = SalesDeskUI()
    app.run()


if __name__ == "__main__":
    main()
