# receipt_desk/api/entities.py

from typing import List

from fastapi import APIRouter, Depends

from receipt_desk.api.deps import get_storage
from receipt_desk.db.storage import Storage

router = APIRouter(prefix="/api/entities", tags=["entities"])


@router.get("", response_model=List[str])
def list_entities(storage: Storage = Depends(get_storage)) -> List[str]:
    """
    Distinct entity names, for the entity filter options.
    """
    return storage.list_entities()
