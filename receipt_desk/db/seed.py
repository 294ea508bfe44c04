# receipt_desk/db/seed.py
"""
Sample receipts loaded at startup when SEED_SAMPLE_DATA is enabled.
"""

import logging
from datetime import datetime

from receipt_desk.db.storage import Storage

logger = logging.getLogger(__name__)

SAMPLE_RECEIPTS = [
    {
        "receiptNumber": "56789",
        "datetime": datetime(2025, 8, 20, 10, 30),
        "entity": "Ali Transport",
        "vehicle": "ABC-123",
        "staff": "Hamza Khan",
        "branch": "Main Branch",
        "paymentMethod": "cash",
        "creditAmount": "5000",
        "recoveryAmount": "2000",
        "totalAmount": "12000",
        "outstandingAmount": "8000",
        "status": "completed",
        "salesmanName": "Bilal Ahmed",
        "salesmanMessage": "Partial payment received, balance due next week.",
    },
    {
        "receiptNumber": "56790",
        "datetime": datetime(2025, 8, 21, 14, 15),
        "entity": "Khan Industries",
        "vehicle": "XYZ-456",
        "staff": "Ahmed Ali",
        "branch": "North Branch",
        "paymentMethod": "credit",
        "creditAmount": "15000",
        "recoveryAmount": "0",
        "totalAmount": "15000",
        "outstandingAmount": "15000",
        "status": "pending",
        "salesmanName": "Imran Qureshi",
    },
    {
        "receiptNumber": "56791",
        "datetime": datetime(2025, 8, 22, 9, 45),
        "entity": "City Logistics",
        "vehicle": "PQR-789",
        "staff": "Sara Sheikh",
        "branch": "South Branch",
        "paymentMethod": "recovery",
        "creditAmount": "0",
        "recoveryAmount": "8500",
        "totalAmount": "8500",
        "outstandingAmount": "0",
        "status": "completed",
        "salesmanName": "Fahad Siddiqui",
    },
    {
        "receiptNumber": "56792",
        "datetime": datetime(2025, 8, 18, 16, 20),
        "entity": "Express Delivery",
        "vehicle": "RST-101",
        "staff": "Usman Malik",
        "branch": "East Branch",
        "paymentMethod": "credit",
        "creditAmount": "25000",
        "recoveryAmount": "5000",
        "totalAmount": "30000",
        "outstandingAmount": "20000",
        "status": "overdue",
        "salesmanName": "Kamran Javed",
    },
]


def seed_sample_data(storage: Storage) -> int:
    """Load the sample receipts into an empty store. Returns the number inserted."""
    if storage.count_receipts() > 0:
        logger.info("Store already has receipts; skipping sample data")
        return 0
    n = storage.seed(SAMPLE_RECEIPTS)
    logger.info("Seeded %s sample receipts", n)
    return n
