from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from ..analytics.customers import DateWindow


# Request models
class ChatHistoryItem(BaseModel):
    """Earlier chat turn"""
    role: str = Field(..., pattern="^(user|assistant)$")
    content: str


class ChatRequest(BaseModel):
    """Chat request"""
    password: str = Field(..., description="Chat password")
    message: str = Field(..., description="User question")
    history: List[ChatHistoryItem] = Field(default_factory=list)


# Response models
class HealthResponse(BaseModel):
    """Health check"""
    status: str
    version: str
    engine_status: str
    record_count: int = 0


class CustomerResponse(BaseModel):
    """Customer summary"""
    phone: str
    name: str
    facebook_name: Optional[str] = None
    address: str
    total_spent: float
    order_count: int


class SaleRecordResponse(BaseModel):
    """Sale line item"""
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


class SearchResponse(BaseModel):
    """Search outcome: one selected customer, or a list to choose from"""
    query: str
    selected: Optional[CustomerResponse] = None
    results: List[CustomerResponse]


class CustomerHistoryResponse(BaseModel):
    """Customer with records for a window"""
    customer: CustomerResponse
    window: DateWindow
    records: List[SaleRecordResponse]


class ChatResponse(BaseModel):
    """Assistant reply"""
    answer: str
    timestamp: datetime = Field(default_factory=datetime.now)
