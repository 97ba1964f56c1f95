import streamlit as st
import plotly.graph_objects as go
import pandas as pd
from datetime import date, datetime
from typing import Any, Callable, List, Optional, Sequence

from ..data.models import ChatMessage, CustomerSummary, SaleRecord

PLACEHOLDER = '-'


def format_amount(value: Optional[float]) -> str:
    """Thousands separators, decimals only when present"""
    if value is None or pd.isna(value):
        return PLACEHOLDER
    if float(value).is_integer():
        return f"{value:,.0f}"
    return f"{value:,.2f}"


def format_thai_date(value: date) -> str:
    """dd/mm/yyyy in the Buddhist calendar, as th-TH displays dates"""
    return f"{value.day:02d}/{value.month:02d}/{value.year + 543}"


def MetricsCard(title: str, value: str, delta: str = None):
    """Metric tile"""
    container = st.container()
    with container:
        st.metric(
            label=title,
            value=value,
            delta=delta
        )


def CustomerSummaryCard(customer: CustomerSummary):
    """Customer header with totals"""
    with st.container(border=True):
        col1, col2, col3 = st.columns([3, 1, 1])

        with col1:
            st.subheader(f"👤 {customer.name}")
            st.write(customer.phone)
            if customer.facebook_name and customer.facebook_name != customer.name:
                st.caption(f"Facebook: {customer.facebook_name}")
            st.caption(customer.address)

        with col2:
            MetricsCard("ยอดรวม", f"{format_amount(customer.total_spent)} บาท")

        with col3:
            MetricsCard("จำนวนครั้งที่สั่ง", f"{customer.order_count}")


def SpendingChart(data: pd.DataFrame):
    """Monthly spending bars"""
    if data.empty:
        return

    fig = go.Figure()

    fig.add_trace(go.Bar(
        x=data['month'],
        y=data['revenue'],
        name='ยอดซื้อ',
        marker_color='#0284c7'
    ))

    fig.update_layout(
        title="ยอดซื้อรายเดือน",
        xaxis_title="เดือน",
        yaxis_title="บาท",
        hovermode='x unified',
        height=300
    )

    st.plotly_chart(fig, use_container_width=True)


def HistoryTable(records: Sequence[SaleRecord], is_highlighted: Callable[[SaleRecord], bool]):
    """Purchase history, recent rows highlighted"""
    st.markdown("#### 📋 ประวัติการสั่งซื้อ")

    if not records:
        st.info("ไม่พบข้อมูลการซื้อในระยะเวลาที่เลือก")
        return

    df = pd.DataFrame([
        {
            'วันที่ขาย': format_thai_date(record.sale_date),
            'สินค้า': record.product_name or PLACEHOLDER,
            'จำนวน': format_amount(record.quantity),
            'ราคา': format_amount(record.price),
            'พนักงานขาย': record.seller_name or PLACEHOLDER,
        }
        for record in records
    ])
    highlighted = [is_highlighted(record) for record in records]

    def _row_style(row: pd.Series) -> List[str]:
        style = 'background-color: rgba(14, 165, 233, 0.15)' if highlighted[row.name] else ''
        return [style] * len(row)

    st.dataframe(
        df.style.apply(_row_style, axis=1),
        use_container_width=True,
        hide_index=True
    )


def SearchResultsList(results: Sequence[CustomerSummary], on_select: Callable[[CustomerSummary], Any]):
    """Candidates when a search matched several customers"""
    st.markdown(f"**พบผลลัพธ์ {len(results)} รายการ กรุณาเลือก:**")

    for customer in results:
        st.button(
            f"{customer.name} · {customer.phone}",
            key=f"result_{customer.phone}",
            on_click=on_select,
            args=(customer,),
            use_container_width=True
        )


def PasswordGate(on_change: Callable[[], Any], key: str):
    """Password prompt in front of the chat"""
    _, col, _ = st.columns([1, 2, 1])
    with col:
        with st.container(border=True):
            st.subheader("✨ AI Chat Access")
            st.write("กรุณาใส่รหัสผ่านเพื่อเริ่มการสนทนากับ AI")
            st.text_input(
                "รหัสผ่าน",
                type="password",
                key=key,
                on_change=on_change,
                placeholder="••••••••",
                label_visibility="collapsed"
            )


def ChatWelcome(example_questions: Sequence[str]):
    """Empty conversation placeholder"""
    st.markdown("### ✨ สวัสดี! ฉันคือผู้ช่วย AI ของคุณ")
    examples = ' หรือ '.join(f'"{q}"' for q in example_questions[:2])
    st.write(f"ฉันสามารถตอบคำถามจากข้อมูลการขายทั้งหมดได้ ลองถามคำถาม เช่น {examples}")


def ChatInterface(messages: Sequence[ChatMessage], send_callback: Callable[[str], Any],
                  is_loading: bool = False, error: Optional[str] = None):
    """Chat history and input"""
    for message in messages:
        with st.chat_message(message.role):
            st.write(message.content)
            st.caption(message.timestamp.strftime('%H:%M'))

    if error:
        st.error(error)

    if prompt := st.chat_input("ถามคำถามเกี่ยวกับข้อมูลการขาย...", disabled=is_loading):
        with st.chat_message("user"):
            st.write(prompt)

        with st.spinner("AI กำลังคิด..."):
            send_callback(prompt)

        st.rerun()


def format_timestamp(value: Optional[datetime]) -> str:
    return value.strftime('%H:%M:%S') if value else PLACEHOLDER
