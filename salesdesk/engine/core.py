# salesdesk/engine/core.py
import logging
from datetime import date, datetime
from typing import Dict, Any, List, Optional, Sequence, Union

from ..analytics.customers import (
    DateWindow,
    aggregate_customers,
    customer_records,
    filter_by_window
)
from ..data.models import CustomerSummary, SaleRecord
from .chat import ChatSession
from .lookup import CustomerLookup

logger = logging.getLogger(__name__)


def get_repository(repo_class=None, mock_class=None):
    """Sales repository, falling back to demo data when the file is unusable"""
    from config.settings import get_settings
    from ..data.repositories import SalesRecordRepository
    from ..data.mock_repository import MockSalesRepository

    repo_class = repo_class or SalesRecordRepository
    mock_class = mock_class or MockSalesRepository

    if get_settings().data_source.use_mock:
        return mock_class()

    try:
        return repo_class()
    except Exception as e:
        logger.warning(f"Sales data file unavailable, using mock data: {e}")
        return mock_class()


class SalesDeskCore:
    """Dashboard state: records, derived customers, lookup and chat"""

    def __init__(self, repository=None, assistant=None, chat_password: str = None):
        self.repository = repository or get_repository()

        if assistant is None:
            from ..llm.assistant import SalesAssistant
            assistant = SalesAssistant()
        self.assistant = assistant

        self.lookup = CustomerLookup()
        self.chat = ChatSession(self.assistant, chat_password)

        self.records: Optional[List[SaleRecord]] = None
        self._customers: List[CustomerSummary] = []
        self._customers_source = None

        self.state: Dict[str, Any] = {
            'is_loading': False,
            'error': None,
            'last_loaded': None
        }

    def load_records(self) -> bool:
        """Fetch records from the repository; failures end up in state['error']"""
        logger.info("Loading sales records")
        self.state['is_loading'] = True
        self.state['error'] = None

        try:
            records = self.repository.get_sales_records()
        except Exception as e:
            logger.error(f"Failed to load sales records: {e}", exc_info=True)
            self.state['error'] = f"ไม่สามารถโหลดข้อมูลการขายได้: {e}"
            return False
        finally:
            self.state['is_loading'] = False

        self.set_records(records)
        return True

    def set_records(self, records: Sequence[SaleRecord]):
        self.records = list(records)
        self.assistant.set_records(self.records)
        self.lookup.refresh(self.customers)
        self.state['last_loaded'] = datetime.now()
        logger.info(f"{len(self.records)} records, {len(self.customers)} customers")

    @property
    def customers(self) -> List[CustomerSummary]:
        """Customer summaries, recomputed only when the record list is replaced"""
        if self.records is not self._customers_source:
            self._customers = aggregate_customers(self.records)
            self._customers_source = self.records
        return self._customers

    def search(self, query: str = None) -> List[CustomerSummary]:
        """Search customers and apply the selection policy"""
        if query is not None:
            self.lookup.set_search_term(query)
        return self.lookup.search(self.customers)

    def find_customer(self, phone: str) -> Optional[CustomerSummary]:
        for customer in self.customers:
            if customer.phone == phone:
                return customer
        return None

    def customer_history(
            self,
            phone: str,
            window: Union[DateWindow, str] = DateWindow.ALL,
            today: Union[date, datetime, None] = None
    ) -> List[SaleRecord]:
        """A customer's records for a window, newest first"""
        return filter_by_window(customer_records(self.records, phone), window, today)

    def selected_records(self, today: Union[date, datetime, None] = None) -> List[SaleRecord]:
        return self.lookup.selected_records(self.records, today)
