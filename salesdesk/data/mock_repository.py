# salesdesk/data/mock_repository.py
import numpy as np
from datetime import datetime, timedelta
from typing import List
import logging

from .models import SaleRecord

logger = logging.getLogger(__name__)

PRODUCTS = [
    ('ครีมกันแดด SPF50', 390),
    ('เซรั่มวิตามินซี', 590),
    ('โฟมล้างหน้า', 250),
    ('มาส์กหน้า (กล่อง 10 แผ่น)', 450),
    ('ลิปบาล์ม', 129),
    ('โลชั่นบำรุงผิว', 320),
    ('ชุดของขวัญ', 1290),
]

SELLERS = ['แอน', 'บีม', 'ฝน', 'ต้น']

CUSTOMERS = [
    ('สมชาย ใจดี', 'Somchai J.', '12/3 ถ.สุขุมวิท', 'คลองตัน', 'คลองเตย', 'กรุงเทพมหานคร', '10110'),
    ('สมหญิง รักสวย', 'Somying Beauty', '45 ม.2', 'สุเทพ', 'เมืองเชียงใหม่', 'เชียงใหม่', '50200'),
    ('วิภา ทองดี', None, '8/1 ซ.รามคำแหง 24', 'หัวหมาก', 'บางกะปิ', 'กรุงเทพมหานคร', '10240'),
    (None, 'Nok Shopping', '99 ถ.มิตรภาพ', 'ในเมือง', 'เมืองขอนแก่น', 'ขอนแก่น', '40000'),
    ('ประเสริฐ มั่นคง', 'Prasert M', None, None, 'หาดใหญ่', 'สงขลา', '90110'),
    ('กาญจนา ศรีสุข', 'Kanjana Srisuk', '7 ถ.ราษฎร์อุทิศ', 'ตลาด', 'เมืองสุราษฎร์ธานี', 'สุราษฎร์ธานี', '84000'),
    ('ธนพล วงศ์ใหญ่', None, '150/9 หมู่บ้านพฤกษา', 'บางเมือง', 'เมืองสมุทรปราการ', 'สมุทรปราการ', '10270'),
    ('อรุณี แสงทอง', 'Arunee Shop', '3 ซ.นวมินทร์ 42', 'คลองกุ่ม', 'บึงกุ่ม', 'กรุงเทพมหานคร', '10240'),
]


class MockSalesRepository:
    """Demo sales records (for development and demos without a data file)"""

    def __init__(self, seed: int = 42, days: int = 365, today: datetime = None):
        logger.info("Using mock sales repository (no data file)")
        self.seed = seed
        self.days = days
        self.today = today or datetime.now()

    def get_sales_records(self) -> List[SaleRecord]:
        """Generate reproducible demo records"""
        rng = np.random.RandomState(self.seed)
        records = []

        for i, (name, fb_name, address, subdistrict, district, province, postal) in enumerate(CUSTOMERS):
            phone = f'08{i + 1}{rng.randint(1000000, 9999999)}'
            visits = rng.randint(1, 12)

            for _ in range(visits):
                sale_date = self.today - timedelta(days=int(rng.randint(0, self.days)),
                                                   hours=int(rng.randint(0, 10)))
                seller = SELLERS[rng.randint(len(SELLERS))]

                # a visit may contain several line items
                for _ in range(rng.randint(1, 4)):
                    product, price = PRODUCTS[rng.randint(len(PRODUCTS))]
                    quantity = int(rng.randint(1, 4))
                    records.append(SaleRecord(
                        sale_date=sale_date,
                        product_name=product,
                        quantity=quantity,
                        price=float(price * quantity),
                        seller_name=seller,
                        buyer_phone=phone,
                        buyer_name=name,
                        facebook_name=fb_name,
                        address=address,
                        subdistrict=subdistrict,
                        district=district,
                        province=province,
                        postal_code=postal,
                    ))

        # walk-in sales without buyer details
        for _ in range(20):
            product, price = PRODUCTS[rng.randint(len(PRODUCTS))]
            records.append(SaleRecord(
                sale_date=self.today - timedelta(days=int(rng.randint(0, self.days))),
                product_name=product,
                quantity=1,
                price=float(price),
                seller_name=SELLERS[rng.randint(len(SELLERS))],
            ))

        records.sort(key=lambda r: r.sale_date)
        logger.info(f"Generated {len(records)} mock sale records")
        return records
