from dataclasses import asdict
from fastapi import APIRouter, Query, HTTPException, Depends
from typing import List
import logging

from .schemas import (
    ChatRequest,
    ChatResponse,
    CustomerResponse,
    CustomerHistoryResponse,
    SaleRecordResponse,
    SearchResponse
)
from .dependencies import get_engine
from ..analytics.customers import DateWindow
from ..data.models import ChatMessage, CustomerSummary
from ..engine.chat import ChatSession
from ..engine.core import SalesDeskCore
from ..engine.lookup import CustomerLookup

logger = logging.getLogger(__name__)

router = APIRouter()


def _customer(customer: CustomerSummary) -> CustomerResponse:
    return CustomerResponse(**asdict(customer))


@router.get("/customers", response_model=List[CustomerResponse])
def list_customers(engine: SalesDeskCore = Depends(get_engine)):
    """All customer summaries"""
    return [_customer(c) for c in engine.customers]


@router.get("/customers/search", response_model=SearchResponse)
def search_customers(
        q: str = Query("", description="Name, Facebook name or phone number"),
        engine: SalesDeskCore = Depends(get_engine)
):
    """Search customers; a single match comes back as `selected`"""
    # per-request lookup, the UI selection is not touched
    lookup = CustomerLookup()
    lookup.set_search_term(q)
    lookup.search(engine.customers)

    return SearchResponse(
        query=q,
        selected=_customer(lookup.selected) if lookup.selected else None,
        results=[_customer(c) for c in lookup.results or []]
    )


@router.get("/customers/{phone}/history", response_model=CustomerHistoryResponse)
def get_customer_history(
        phone: str,
        window: DateWindow = Query(DateWindow.ALL, description="all or 3months"),
        engine: SalesDeskCore = Depends(get_engine)
):
    """A customer's purchase history, newest first"""
    customer = engine.find_customer(phone)
    if customer is None:
        raise HTTPException(status_code=404, detail=f"Customer {phone} not found")

    records = engine.customer_history(phone, window)
    return CustomerHistoryResponse(
        customer=_customer(customer),
        window=window,
        records=[SaleRecordResponse(**asdict(r)) for r in records]
    )


@router.post("/chat", response_model=ChatResponse)
def chat(request: ChatRequest, engine: SalesDeskCore = Depends(get_engine)):
    """Ask the sales assistant"""
    session = ChatSession(engine.assistant, engine.chat.chat_password)
    session.set_password(request.password)

    if not session.is_unlocked:
        raise HTTPException(status_code=403, detail="Chat is locked")
    if not request.message.strip():
        raise HTTPException(status_code=400, detail="Message is empty")

    session.messages = [ChatMessage(role=item.role, content=item.content) for item in request.history]
    answer = session.send_message(request.message)

    if answer is None:
        raise HTTPException(status_code=502, detail=session.error)

    return ChatResponse(answer=answer)
