"""Customer view over flat sale records.

Records are grouped by buyer phone into ``CustomerSummary`` values; records
without a phone cannot be attributed to anyone and are left out. An "order"
is one calendar day of purchases, however many line items it holds.
"""
import re
import logging
from enum import Enum
from dataclasses import asdict, fields
from datetime import date, datetime, timedelta
from typing import List, Optional, Sequence, Union, Any

import pandas as pd

from ..data.models import SaleRecord, CustomerSummary, UNKNOWN_NAME, NO_ADDRESS

logger = logging.getLogger(__name__)

RECENT_DAYS = 90
ADDRESS_FIELDS = ['address', 'subdistrict', 'district', 'province', 'postal_code']
RECORD_COLUMNS = [f.name for f in fields(SaleRecord)]


class DateWindow(str, Enum):
    """History table time window"""
    ALL = 'all'
    THREE_MONTHS = '3months'


def _text(value: Any) -> str:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ''
    return str(value).strip()


def records_to_frame(records: Sequence[SaleRecord]) -> pd.DataFrame:
    """One row per record, in input order"""
    return pd.DataFrame([asdict(r) for r in records], columns=RECORD_COLUMNS)


def format_address(row) -> str:
    parts = [_text(row[name]) for name in ADDRESS_FIELDS]
    return ' '.join(part for part in parts if part) or NO_ADDRESS


def aggregate_customers(records: Optional[Sequence[SaleRecord]]) -> List[CustomerSummary]:
    """Group records by buyer phone into customer summaries.

    The newest record of each customer supplies name, alias and address;
    records sharing the newest date resolve to the earliest of them in input
    order. Customers come out in order of first appearance.
    """
    if not records:
        return []

    df = records_to_frame(records)
    # same day rule as the window filter; sale dates may carry different timezones
    df['sale_day'] = [sale_day(r) for r in records]
    df['sale_instant'] = [sale_instant(r) for r in records]

    df = df[df['buyer_phone'].map(_text) != ''].copy()
    if df.empty:
        return []

    df['price'] = pd.to_numeric(df['price'], errors='coerce').fillna(0)

    grouped = df.groupby('buyer_phone', sort=False)
    totals = grouped['price'].sum()
    order_counts = grouped['sale_day'].nunique()

    latest = (
        df.sort_values('sale_instant', ascending=False, kind='stable')
        .drop_duplicates('buyer_phone', keep='first')
        .set_index('buyer_phone')
    )

    customers = []
    for phone in totals.index:
        row = latest.loc[phone]
        facebook_name = _text(row['facebook_name']) or None
        customers.append(CustomerSummary(
            phone=phone,
            name=_text(row['buyer_name']) or facebook_name or UNKNOWN_NAME,
            facebook_name=facebook_name,
            address=format_address(row),
            total_spent=float(totals[phone]),
            order_count=int(order_counts[phone]),
        ))

    logger.debug(f"Aggregated {len(df)} records into {len(customers)} customers")
    return customers


def phone_digits(text: Optional[str]) -> str:
    return re.sub(r'\D', '', text or '')


def search_customers(customers: Sequence[CustomerSummary], query: str) -> List[CustomerSummary]:
    """Case-insensitive match on name and alias, digit match on phone.

    A blank query means no search was made and returns nothing.
    """
    term = (query or '').strip()
    if not term:
        return []

    lowered = term.lower()
    digits = phone_digits(term)

    results = []
    for customer in customers:
        if digits and digits in phone_digits(customer.phone):
            results.append(customer)
        elif lowered in customer.name.lower():
            results.append(customer)
        elif lowered in (customer.facebook_name or '').lower():
            results.append(customer)

    return results


def sale_day(record: SaleRecord) -> date:
    value = record.sale_date
    return value.date() if isinstance(value, datetime) else value


def sale_instant(record: SaleRecord) -> pd.Timestamp:
    """Sale time in UTC, for ordering; naive values are read as UTC"""
    stamp = pd.Timestamp(record.sale_date)
    return stamp.tz_convert('UTC') if stamp.tzinfo else stamp.tz_localize('UTC')


def window_start(today: Union[date, datetime, None] = None) -> date:
    """First day inside the 3-month window"""
    today = today or date.today()
    if isinstance(today, datetime):
        today = today.date()
    return today - timedelta(days=RECENT_DAYS)


def is_recent(record: SaleRecord, today: Union[date, datetime, None] = None) -> bool:
    return sale_day(record) >= window_start(today)


def filter_by_window(
        records: Sequence[SaleRecord],
        window: Union[DateWindow, str],
        today: Union[date, datetime, None] = None
) -> List[SaleRecord]:
    """Restrict records to the selected window"""
    if DateWindow(window) is DateWindow.ALL:
        return list(records)

    start = window_start(today)
    return [r for r in records if sale_day(r) >= start]


def customer_records(records: Optional[Sequence[SaleRecord]], phone: str) -> List[SaleRecord]:
    """A customer's records, newest first"""
    if not records or not phone:
        return []
    matching = [r for r in records if r.buyer_phone == phone]
    return sorted(matching, key=sale_instant, reverse=True)
