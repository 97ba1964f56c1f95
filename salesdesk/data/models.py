from datetime import datetime
from typing import Optional
from dataclasses import dataclass, field

# Column headers of the shop's sales sheet, mapped to SaleRecord fields
SHEET_COLUMNS = {
    'วันที่ขาย': 'sale_date',
    'สินค้า': 'product_name',
    'จำนวน': 'quantity',
    'ราคา': 'price',
    'พนักงานขาย': 'seller_name',
    'เบอร์โทร': 'buyer_phone',
    'ชื่อผู้รับ': 'buyer_name',
    'ชื่อ Facebook': 'facebook_name',
    'ที่อยู่': 'address',
    'ตำบล': 'subdistrict',
    'อำเภอ': 'district',
    'จังหวัด': 'province',
    'รหัสไปรษณีย์': 'postal_code',
}

UNKNOWN_NAME = 'Unknown'
NO_ADDRESS = 'ไม่มีข้อมูลที่อยู่'


@dataclass(frozen=True)
class SaleRecord:
    """One line item of a sale"""
    sale_date: datetime
    product_name: Optional[str] = None
    quantity: Optional[float] = None
    price: Optional[float] = None
    seller_name: Optional[str] = None
    buyer_phone: Optional[str] = None
    buyer_name: Optional[str] = None
    facebook_name: Optional[str] = None
    address: Optional[str] = None
    subdistrict: Optional[str] = None
    district: Optional[str] = None
    province: Optional[str] = None
    postal_code: Optional[str] = None


@dataclass(frozen=True)
class CustomerSummary:
    """All sale records sharing one buyer phone"""
    phone: str
    name: str
    address: str
    total_spent: float
    order_count: int
    facebook_name: Optional[str] = None


@dataclass
class ChatMessage:
    """A chat turn"""
    role: str
    content: str
    timestamp: datetime = field(default_factory=datetime.now)
