from datetime import datetime

import pandas as pd
import pytest
from salesdesk.data.repositories import SalesRecordRepository, frame_to_records
from salesdesk.data.mock_repository import MockSalesRepository

CSV_CONTENT = """วันที่ขาย,สินค้า,จำนวน,ราคา,พนักงานขาย,เบอร์โทร,ชื่อผู้รับ,ชื่อ Facebook,ที่อยู่,ตำบล,อำเภอ,จังหวัด,รหัสไปรษณีย์
2024-05-03,ลิปบาล์ม,2,258,แอน,0812345678,สมชาย ใจดี,Somchai J.,12/3 ถ.สุขุมวิท,คลองตัน,คลองเตย,กรุงเทพมหานคร,01110
15/05/2024,เซรั่มวิตามินซี,1,590,บีม,0899999999,,Nok Shopping,,,,,
,โฟมล้างหน้า,1,250,แอน,0811111111,ไม่มีวันที่,,,,,,
2024-06-01,ครีมกันแดด SPF50,,,ฝน,,,,,,,,
"""


@pytest.fixture
def csv_file(tmp_path):
    path = tmp_path / "sales.csv"
    path.write_text(CSV_CONTENT, encoding="utf-8")
    return path


class TestSalesRecordRepository:
    """Loading the shop's sheet export"""

    def test_load_csv(self, csv_file):
        records = SalesRecordRepository(path=str(csv_file)).get_sales_records()

        # the row without a date is skipped
        assert len(records) == 3

        first = records[0]
        assert first.sale_date == datetime(2024, 5, 3)
        assert first.product_name == 'ลิปบาล์ม'
        assert first.quantity == 2
        assert first.price == 258
        assert first.buyer_phone == '0812345678'
        assert first.postal_code == '01110'
        assert first.facebook_name == 'Somchai J.'

    def test_day_first_dates(self, csv_file):
        records = SalesRecordRepository(path=str(csv_file)).get_sales_records()
        assert records[1].sale_date == datetime(2024, 5, 15)

    def test_blank_cells_become_none(self, csv_file):
        records = SalesRecordRepository(path=str(csv_file)).get_sales_records()

        assert records[1].buyer_name is None
        assert records[1].address is None
        assert records[2].buyer_phone is None
        assert records[2].price is None
        assert records[2].quantity is None

    def test_missing_file(self, tmp_path):
        repository = SalesRecordRepository(path=str(tmp_path / "missing.csv"))

        with pytest.raises(FileNotFoundError):
            repository.get_sales_records()

    def test_empty_path_rejected(self):
        with pytest.raises(ValueError):
            SalesRecordRepository(path="")


class TestFrameToRecords:
    """Sheet-shaped DataFrame conversion"""

    def test_missing_date_column(self):
        df = pd.DataFrame({'สินค้า': ['ลิปบาล์ม']})

        with pytest.raises(ValueError):
            frame_to_records(df)

    def test_optional_columns_may_be_absent(self):
        df = pd.DataFrame({
            'วันที่ขาย': [datetime(2024, 1, 2, 10, 30)],
            'เบอร์โทร': ['0812345678'],
        })

        records = frame_to_records(df)

        assert records[0].sale_date == datetime(2024, 1, 2, 10, 30)
        assert records[0].buyer_phone == '0812345678'
        assert records[0].product_name is None
        assert records[0].price is None

    def test_header_whitespace_ignored(self):
        df = pd.DataFrame({' วันที่ขาย ': ['2024-01-02'], 'ราคา ': ['390']})

        records = frame_to_records(df)

        assert records[0].price == 390.0


class TestMockSalesRepository:
    """Demo data"""

    def test_reproducible(self):
        today = datetime(2024, 6, 30)
        first = MockSalesRepository(seed=7, today=today).get_sales_records()
        second = MockSalesRepository(seed=7, today=today).get_sales_records()

        assert first == second

    def test_shape(self):
        today = datetime(2024, 6, 30)
        records = MockSalesRepository(today=today, days=365).get_sales_records()

        assert records
        assert all(r.sale_date <= today for r in records)
        assert any(r.buyer_phone is None for r in records)
        assert len({r.buyer_phone for r in records if r.buyer_phone}) == 8
