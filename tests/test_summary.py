from datetime import date, datetime, timedelta, timezone

import pytest
from salesdesk.analytics.summary import build_sales_context, monthly_spending
from salesdesk.data.models import SaleRecord


@pytest.fixture
def records():
    return [
        SaleRecord(sale_date=datetime(2024, 5, 3, 10), buyer_phone='0811111111', buyer_name='สมชาย',
                   product_name='ลิปบาล์ม', quantity=2, price=258.0, seller_name='แอน'),
        SaleRecord(sale_date=datetime(2024, 5, 3, 16), buyer_phone='0811111111', buyer_name='สมชาย',
                   product_name='เซรั่มวิตามินซี', quantity=1, price=590.0, seller_name='แอน'),
        SaleRecord(sale_date=datetime(2024, 5, 20), buyer_phone='0822222222', buyer_name='วิภา',
                   product_name='ลิปบาล์ม', quantity=1, price=129.0, seller_name='บีม'),
        SaleRecord(sale_date=datetime(2024, 6, 1), product_name='โฟมล้างหน้า', quantity=1, price=None),
    ]


class TestMonthlySpending:
    """Revenue per month"""

    def test_groups_by_month(self, records):
        monthly = monthly_spending(records)

        assert list(monthly['revenue']) == [977.0, 0.0]
        assert list(monthly['orders']) == [2, 1]
        assert monthly['month'].iloc[0] == datetime(2024, 5, 1)

    def test_empty(self):
        assert monthly_spending([]).empty
        assert monthly_spending(None).empty


class TestBuildSalesContext:
    """Data summary given to the assistant"""

    def test_no_data(self):
        assert build_sales_context(None) == "ไม่มีข้อมูลการขาย"

    def test_summary_lines(self, records):
        context = build_sales_context(records)

        assert "จำนวนรายการขายทั้งหมด: 4 รายการ" in context
        assert "ยอดขายรวมทั้งหมด: 977 บาท" in context
        assert "03/05/2024 ถึง 01/06/2024" in context
        assert "- 05/2024: 977 บาท" in context
        assert "- ลิปบาล์ม: 387 บาท, 3 ชิ้น" in context
        assert "- แอน: 848 บาท" in context
        assert "สมชาย (0811111111): 848 บาท, 1 ครั้ง" in context

    def test_mixed_timezones(self):
        bangkok = timezone(timedelta(hours=7))
        records = [
            SaleRecord(sale_date=datetime(2024, 4, 1, 1, tzinfo=bangkok), buyer_phone='1', buyer_name='สมชาย',
                       product_name='ลิปบาล์ม', quantity=1, price=2.0),
            SaleRecord(sale_date=datetime(2024, 4, 1, 1, tzinfo=timezone.utc), buyer_phone='1', buyer_name='สมชาย',
                       product_name='ลิปบาล์ม', quantity=1, price=3.0),
            SaleRecord(sale_date=date(2024, 5, 2), product_name='โฟมล้างหน้า', quantity=1, price=250.0),
        ]

        context = build_sales_context(records)

        assert "01/04/2024 ถึง 02/05/2024" in context
        assert "- 04/2024: 5 บาท (1 วันที่มีการขาย)" in context
        assert "สมชาย (1): 5 บาท, 1 ครั้ง" in context

        monthly = monthly_spending(records)
        assert list(monthly['revenue']) == [5.0, 250.0]

    def test_top_n_limits_products(self, records):
        context = build_sales_context(records, top_n=1)

        assert "สินค้าขายดี 1 อันดับแรก" in context
        assert "- เซรั่มวิตามินซี: 590 บาท" in context
        assert "โฟมล้างหน้า" not in context
