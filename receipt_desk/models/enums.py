# receipt_desk/models/enums.py

from enum import Enum


class PaymentMethod(str, Enum):
    CASH = "cash"
    CREDIT = "credit"
    RECOVERY = "recovery"


class ReceiptStatus(str, Enum):
    COMPLETED = "completed"
    PENDING = "pending"
    OVERDUE = "overdue"


class Frequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class ExportFormat(str, Enum):
    PDF = "pdf"
    EXCEL = "excel"
    BOTH = "both"


# Filter value meaning "no constraint on this field"
ALL = "all"
