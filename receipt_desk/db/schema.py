# receipt_desk/db/schema.py

from sqlalchemy import (
    MetaData, Table, Column, Integer, String,
    DateTime, Boolean, JSON, CheckConstraint, Text
)

metadata = MetaData()

# "seq" is an insertion counter; it breaks ties when sorting by timestamp
receipts = Table(
    "receipts",
    metadata,
    Column("seq", Integer, primary_key=True, autoincrement=True),
    Column("id", String(36), nullable=False, unique=True),
    Column("receipt_number", Text, nullable=False, unique=True),
    Column("issued_at", DateTime, nullable=False, index=True),
    Column("entity", Text, nullable=False, index=True),
    Column("vehicle", Text),
    Column("staff", Text, nullable=False),
    Column("branch", Text, nullable=False),
    Column("payment_method", String(16), nullable=False),
    # Decimal amounts kept as their canonical text, e.g. "1000" or "12.50"
    Column("credit_amount", String(16), nullable=False, default="0"),
    Column("recovery_amount", String(16), nullable=False, default="0"),
    Column("total_amount", String(16), nullable=False),
    Column("outstanding_amount", String(16), nullable=False, default="0"),
    Column("status", String(16), nullable=False, default="completed"),
    Column("salesman_name", Text, nullable=False),
    Column("salesman_photo", Text),
    Column("salesman_message", Text),
    Column("receipt_photos", JSON, nullable=False, default=list),
    CheckConstraint(
        "payment_method IN ('cash', 'credit', 'recovery')",
        name="ck_receipts_payment_method",
    ),
    CheckConstraint(
        "status IN ('completed', 'pending', 'overdue')",
        name="ck_receipts_status",
    ),
)

schedules = Table(
    "schedules",
    metadata,
    Column("seq", Integer, primary_key=True, autoincrement=True),
    Column("id", String(36), nullable=False, unique=True),
    Column("frequency", String(16), nullable=False),
    Column("time", String(5), nullable=False),
    Column("format", String(16), nullable=False),
    Column("email", Text),
    Column("auto_download", Boolean, nullable=False, default=False),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("created_at", DateTime, nullable=False),
    CheckConstraint(
        "frequency IN ('daily', 'weekly', 'monthly')",
        name="ck_schedules_frequency",
    ),
    CheckConstraint(
        "format IN ('pdf', 'excel', 'both')",
        name="ck_schedules_format",
    ),
)
