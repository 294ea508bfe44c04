# receipt_desk/api/receipts.py

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from starlette.status import HTTP_201_CREATED

from receipt_desk.api.deps import get_storage
from receipt_desk.db.storage import Storage
from receipt_desk.errors import NotFoundError
from receipt_desk.models.receipts import (
    ExportRequest,
    ExportResponse,
    Receipt,
    ReceiptCreate,
    ReceiptStatusUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/receipts", tags=["receipts"])


@router.get("", response_model=List[Receipt])
def list_receipts(
    search: Optional[str] = Query(
        default=None,
        description="Case-insensitive match on receipt number, entity, staff or vehicle",
    ),
    date_from: Optional[str] = Query(
        default=None, alias="dateFrom", description="ISO date or date-time, inclusive"
    ),
    date_to: Optional[str] = Query(
        default=None, alias="dateTo", description="ISO date or date-time, inclusive"
    ),
    payment_method: Optional[str] = Query(
        default=None, alias="paymentMethod", description="cash | credit | recovery | all"
    ),
    status: Optional[str] = Query(
        default=None, description="completed | pending | overdue | all"
    ),
    entity: Optional[str] = Query(default=None, description="Exact entity name or all"),
    storage: Storage = Depends(get_storage),
) -> List[Receipt]:
    """
    Returns receipts matching every supplied filter, most recent first.
    """
    return storage.list_receipts(
        {
            "search": search,
            "dateFrom": date_from,
            "dateTo": date_to,
            "paymentMethod": payment_method,
            "status": status,
            "entity": entity,
        }
    )


@router.post("", response_model=Receipt, status_code=HTTP_201_CREATED)
def create_receipt(
    payload: ReceiptCreate,
    storage: Storage = Depends(get_storage),
) -> Receipt:
    return storage.create_receipt(payload)


@router.post("/export", response_model=ExportResponse)
def export_receipts(
    payload: ExportRequest,
    storage: Storage = Depends(get_storage),
) -> ExportResponse:
    """
    Acknowledges an export request with the number of matching receipts.
    No file is produced.
    """
    count = storage.count_receipts(payload.filters)
    logger.info("Export of %s receipts requested as %s", count, payload.format.value)

    return ExportResponse(
        message=f"Export of {count} receipts in {payload.format.value} format initiated",
        count=count,
        format=payload.format,
    )


@router.get("/{receipt_id}", response_model=Receipt)
def get_receipt(receipt_id: str, storage: Storage = Depends(get_storage)) -> Receipt:
    receipt = storage.get_receipt_by_id(receipt_id)
    if receipt is None:
        raise NotFoundError("Receipt not found")
    return receipt


@router.patch("/{receipt_id}/status", response_model=Receipt)
def update_receipt_status(
    receipt_id: str,
    payload: ReceiptStatusUpdate,
    storage: Storage = Depends(get_storage),
) -> Receipt:
    """
    Approve, flag or reopen a receipt. Only the status changes.
    """
    receipt = storage.update_receipt_status(receipt_id, payload.status)
    if receipt is None:
        raise NotFoundError("Receipt not found")
    return receipt
