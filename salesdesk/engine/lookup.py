import logging
from datetime import date, datetime
from typing import List, Optional, Sequence, Union

from ..analytics.customers import (
    DateWindow,
    search_customers,
    customer_records,
    filter_by_window,
    is_recent
)
from ..data.models import CustomerSummary, SaleRecord

logger = logging.getLogger(__name__)


class CustomerLookup:
    """Interaction state of the sales history page.

    ``results`` is None when no list should be shown, an empty list for an
    explicit "not found", and holds the candidates when a search matched
    several customers.
    """

    def __init__(self):
        self.search_term = ''
        self.results: Optional[List[CustomerSummary]] = None
        self.selected: Optional[CustomerSummary] = None
        self.date_window = DateWindow.ALL

    def set_search_term(self, term: str):
        """Typing a new term drops the selection and previous results"""
        self.search_term = term or ''
        self.selected = None
        self.results = None

    def search(self, customers: Sequence[CustomerSummary]) -> List[CustomerSummary]:
        """Run the current term; a single match is selected directly"""
        results = search_customers(customers, self.search_term)
        logger.info(f"Search '{self.search_term}' matched {len(results)} customers")

        if len(results) == 1:
            self.selected = results[0]
            self.results = None
        else:
            self.selected = None
            self.results = results
        return results

    def select_result(self, customer: CustomerSummary):
        self.selected = customer
        self.results = None
        self.search_term = customer.name

    def clear(self):
        self.search_term = ''
        self.results = None
        self.selected = None

    def set_date_window(self, window: Union[DateWindow, str]):
        self.date_window = DateWindow(window)

    def refresh(self, customers: Sequence[CustomerSummary]):
        """Point the selection at the recomputed summary after a reload"""
        if self.selected is None:
            return
        by_phone = {c.phone: c for c in customers}
        self.selected = by_phone.get(self.selected.phone)
        self.results = None

    def selected_records(
            self,
            records: Optional[Sequence[SaleRecord]],
            today: Union[date, datetime, None] = None
    ) -> List[SaleRecord]:
        """The selected customer's records for the current window, newest first"""
        if self.selected is None:
            return []
        return filter_by_window(customer_records(records, self.selected.phone), self.date_window, today)

    def is_highlighted(self, record: SaleRecord, today: Union[date, datetime, None] = None) -> bool:
        """Recent rows stand out when the whole history is shown"""
        return self.date_window is DateWindow.ALL and is_recent(record, today)
