import logging
from pathlib import Path
from typing import List, Optional, Any
import pandas as pd

from .models import SaleRecord, SHEET_COLUMNS

logger = logging.getLogger(__name__)

TEXT_FIELDS = [
    'product_name', 'seller_name', 'buyer_phone', 'buyer_name', 'facebook_name',
    'address', 'subdistrict', 'district', 'province', 'postal_code'
]
NUMERIC_FIELDS = ['quantity', 'price']


def _clean_text(value: Any) -> Optional[str]:
    """Blank cells and NaN become None"""
    if value is None or pd.isna(value):
        return None
    text = str(value).strip()
    return text or None


def _clean_number(value: Any) -> Optional[float]:
    if value is None or pd.isna(value):
        return None
    return float(value)


def _parse_sale_dates(values: pd.Series) -> pd.Series:
    """ISO dates first, then the sheet's dd/mm/yyyy form"""
    if pd.api.types.is_datetime64_any_dtype(values):
        return values
    iso = pd.to_datetime(values, errors='coerce', format='ISO8601')
    day_first = pd.to_datetime(values, errors='coerce', format='%d/%m/%Y')
    return iso.fillna(day_first)


def frame_to_records(df: pd.DataFrame) -> List[SaleRecord]:
    """Convert a sheet-shaped DataFrame into SaleRecord objects"""
    df = df.rename(columns=lambda c: str(c).strip()).rename(columns=SHEET_COLUMNS)

    if 'sale_date' not in df.columns:
        raise ValueError("Sales data is missing the sale date column (วันที่ขาย)")

    df = df.copy()
    for column in TEXT_FIELDS + NUMERIC_FIELDS:
        if column not in df.columns:
            df[column] = None

    df['sale_date'] = _parse_sale_dates(df['sale_date'])
    for column in NUMERIC_FIELDS:
        df[column] = pd.to_numeric(df[column], errors='coerce')

    undated = int(df['sale_date'].isna().sum())
    if undated:
        logger.warning(f"Skipping {undated} rows without a valid sale date")
        df = df[df['sale_date'].notna()]

    records = []
    for row in df.to_dict('records'):
        records.append(SaleRecord(
            sale_date=row['sale_date'].to_pydatetime(),
            quantity=_clean_number(row['quantity']),
            price=_clean_number(row['price']),
            **{name: _clean_text(row[name]) for name in TEXT_FIELDS}
        ))

    return records


class BaseRepository:
    """Base sales data repository"""

    def get_sales_records(self) -> List[SaleRecord]:
        raise NotImplementedError


class SalesRecordRepository(BaseRepository):
    """Sales records exported from the shop's sheet (CSV or Excel)"""

    def __init__(self, path: str = None, sheet_name: str = None):
        if path is None:
            from config.settings import get_settings
            source = get_settings().data_source
            path = source.path
            sheet_name = sheet_name or source.sheet_name

        if not path:
            raise ValueError("No sales data file configured (SALES_DATA_PATH)")

        self.path = Path(path)
        self.sheet_name = sheet_name or 0

    def read_frame(self) -> pd.DataFrame:
        """Read the raw sheet"""
        if not self.path.exists():
            raise FileNotFoundError(f"Sales data file not found: {self.path}")

        # phone numbers and postal codes keep their leading zeros
        text_columns = {'เบอร์โทร': str, 'รหัสไปรษณีย์': str}

        if self.path.suffix.lower() in ('.xlsx', '.xls'):
            df = pd.read_excel(self.path, sheet_name=self.sheet_name, dtype=text_columns)
        else:
            df = pd.read_csv(self.path, dtype=text_columns, encoding='utf-8-sig')

        logger.info(f"Read {len(df)} rows from {self.path}")
        return df

    def get_sales_records(self) -> List[SaleRecord]:
        """Load all sale records"""
        records = frame_to_records(self.read_frame())
        logger.info(f"Loaded {len(records)} sale records")
        return records
