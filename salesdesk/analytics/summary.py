import logging
from typing import Optional, Sequence

import pandas as pd

from ..data.models import SaleRecord
from .customers import records_to_frame, aggregate_customers, sale_day

logger = logging.getLogger(__name__)


def _sales_frame(records: Sequence[SaleRecord]) -> pd.DataFrame:
    df = records_to_frame(records)
    # calendar day of each sale in its own timezone
    df['sale_date'] = pd.to_datetime(pd.Series([sale_day(r) for r in records], index=df.index))
    df['price'] = pd.to_numeric(df['price'], errors='coerce').fillna(0)
    df['quantity'] = pd.to_numeric(df['quantity'], errors='coerce').fillna(0)
    return df


def monthly_spending(records: Optional[Sequence[SaleRecord]]) -> pd.DataFrame:
    """Revenue per calendar month, oldest first"""
    if not records:
        return pd.DataFrame(columns=['month', 'revenue', 'orders'])

    df = _sales_frame(records)
    df['month'] = df['sale_date'].dt.to_period('M').dt.to_timestamp()
    df['sale_day'] = df['sale_date'].dt.normalize()

    monthly = df.groupby('month').agg(
        revenue=('price', 'sum'),
        orders=('sale_day', 'nunique')
    ).reset_index()

    return monthly.sort_values('month')


def build_sales_context(records: Optional[Sequence[SaleRecord]], top_n: int = 10) -> str:
    """Plain-text summary of the sales data for the assistant prompt"""
    if not records:
        return "ไม่มีข้อมูลการขาย"

    df = _sales_frame(records)
    first_day = df['sale_date'].min().strftime('%d/%m/%Y')
    last_day = df['sale_date'].max().strftime('%d/%m/%Y')

    lines = [
        f"จำนวนรายการขายทั้งหมด: {len(df):,} รายการ",
        f"ช่วงวันที่: {first_day} ถึง {last_day}",
        f"ยอดขายรวมทั้งหมด: {df['price'].sum():,.0f} บาท",
        "",
        "ยอดขายรายเดือน (12 เดือนล่าสุด):"
    ]

    monthly = monthly_spending(records).tail(12)
    for _, row in monthly.iterrows():
        lines.append(f"- {row['month'].strftime('%m/%Y')}: {row['revenue']:,.0f} บาท ({row['orders']} วันที่มีการขาย)")

    products = (
        df[df['product_name'].notna()]
        .groupby('product_name')
        .agg(revenue=('price', 'sum'), units=('quantity', 'sum'))
        .sort_values('revenue', ascending=False)
        .head(top_n)
    )
    if not products.empty:
        lines.append("")
        lines.append(f"สินค้าขายดี {len(products)} อันดับแรก:")
        for name, row in products.iterrows():
            lines.append(f"- {name}: {row['revenue']:,.0f} บาท, {row['units']:,.0f} ชิ้น")

    sellers = (
        df[df['seller_name'].notna()]
        .groupby('seller_name')['price']
        .sum()
        .sort_values(ascending=False)
        .head(top_n)
    )
    if not sellers.empty:
        lines.append("")
        lines.append("ยอดขายตามพนักงานขาย:")
        for name, revenue in sellers.items():
            lines.append(f"- {name}: {revenue:,.0f} บาท")

    customers = sorted(aggregate_customers(records), key=lambda c: c.total_spent, reverse=True)[:top_n]
    if customers:
        lines.append("")
        lines.append(f"ลูกค้าที่มียอดซื้อสูงสุด {len(customers)} อันดับแรก:")
        for customer in customers:
            lines.append(
                f"- {customer.name} ({customer.phone}): {customer.total_spent:,.0f} บาท, "
                f"{customer.order_count} ครั้ง, {customer.address}"
            )

    logger.debug(f"Built sales context from {len(df)} records")
    return "\n".join(lines)
