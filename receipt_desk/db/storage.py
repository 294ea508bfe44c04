# receipt_desk/db/storage.py
"""
Storage engine for receipts and export schedules.

A single ``Storage`` owns both collections for the lifetime of the
application. Every operation runs under one re-entrant lock and every
mutation inside one transaction, so reads always observe completed writes
and read-modify-write updates cannot interleave.
"""

import logging
import threading
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Iterable, List, Mapping, Optional, Type, TypeVar, Union

import pydantic
from sqlalchemy import and_, delete, func, or_, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from receipt_desk.db.engine import get_engine
from receipt_desk.db.schema import metadata, receipts, schedules
from receipt_desk.errors import ValidationError
from receipt_desk.models.enums import ReceiptStatus
from receipt_desk.models.receipts import Receipt, ReceiptCreate, ReceiptFilters
from receipt_desk.models.schedules import Schedule, ScheduleCreate, ScheduleUpdate

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=pydantic.BaseModel)

SEARCH_COLUMNS = (
    receipts.c.receipt_number,
    receipts.c.entity,
    receipts.c.staff,
    receipts.c.vehicle,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _error_details(exc: pydantic.ValidationError) -> List[dict]:
    return [
        {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
        for err in exc.errors()
    ]


def _coerce(model: Type[ModelT], data: Any, what: str) -> ModelT:
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as exc:
        logger.warning("Rejected %s: %s", what, exc.errors())
        raise ValidationError(f"Invalid {what}", details=_error_details(exc)) from exc


def _row_to_receipt(row: Mapping[str, Any]) -> Receipt:
    return Receipt(
        id=row["id"],
        receipt_number=row["receipt_number"],
        issued_at=row["issued_at"],
        entity=row["entity"],
        vehicle=row["vehicle"],
        staff=row["staff"],
        branch=row["branch"],
        payment_method=row["payment_method"],
        credit_amount=Decimal(row["credit_amount"]),
        recovery_amount=Decimal(row["recovery_amount"]),
        total_amount=Decimal(row["total_amount"]),
        outstanding_amount=Decimal(row["outstanding_amount"]),
        status=row["status"],
        salesman_name=row["salesman_name"],
        salesman_photo=row["salesman_photo"],
        salesman_message=row["salesman_message"],
        receipt_photos=list(row["receipt_photos"] or []),
    )


def _row_to_schedule(row: Mapping[str, Any]) -> Schedule:
    return Schedule(
        id=row["id"],
        frequency=row["frequency"],
        time=row["time"],
        format=row["format"],
        email=row["email"],
        auto_download=bool(row["auto_download"]),
        is_active=bool(row["is_active"]),
        created_at=row["created_at"],
    )


class Storage:
    def __init__(self, engine: Engine):
        self._engine = engine
        self._lock = threading.RLock()
        metadata.create_all(engine)

    @classmethod
    def from_url(cls, database_url: str) -> "Storage":
        return cls(get_engine(database_url))

    @property
    def engine(self) -> Engine:
        return self._engine

    # ---- Receipts ----

    def _receipt_conditions(self, filters: ReceiptFilters) -> list:
        conditions = []

        if filters.search:
            needle = filters.search.lower()
            # lower(NULL) never matches, so a missing vehicle is skipped
            conditions.append(
                or_(
                    *(
                        func.lower(column).contains(needle, autoescape=True)
                        for column in SEARCH_COLUMNS
                    )
                )
            )

        if filters.date_from is not None:
            conditions.append(receipts.c.issued_at >= filters.date_from)

        if filters.date_to is not None:
            conditions.append(receipts.c.issued_at <= filters.date_to)

        if filters.payment_method is not None:
            conditions.append(receipts.c.payment_method == filters.payment_method.value)

        if filters.status is not None:
            conditions.append(receipts.c.status == filters.status.value)

        if filters.entity is not None:
            conditions.append(receipts.c.entity == filters.entity)

        return conditions

    def list_receipts(
        self, filters: Union[ReceiptFilters, Mapping[str, Any], None] = None
    ) -> List[Receipt]:
        """
        Return every receipt matching ``filters``, most recent first.

        Receipts sharing a timestamp come back in insertion order.
        """
        filters = _coerce(ReceiptFilters, filters or {}, "receipt filters")
        conditions = self._receipt_conditions(filters)

        stmt = select(receipts)
        if conditions:
            stmt = stmt.where(and_(*conditions))
        stmt = stmt.order_by(receipts.c.issued_at.desc(), receipts.c.seq.asc())

        with self._lock, self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()

        return [_row_to_receipt(row) for row in rows]

    def count_receipts(
        self, filters: Union[ReceiptFilters, Mapping[str, Any], None] = None
    ) -> int:
        filters = _coerce(ReceiptFilters, filters or {}, "receipt filters")
        conditions = self._receipt_conditions(filters)

        stmt = select(func.count()).select_from(receipts)
        if conditions:
            stmt = stmt.where(and_(*conditions))

        with self._lock, self._engine.connect() as conn:
            return conn.execute(stmt).scalar_one()

    def list_entities(self) -> List[str]:
        stmt = select(receipts.c.entity).distinct().order_by(receipts.c.entity)
        with self._lock, self._engine.connect() as conn:
            return list(conn.execute(stmt).scalars().all())

    def get_receipt_by_id(self, receipt_id: str) -> Optional[Receipt]:
        stmt = select(receipts).where(receipts.c.id == receipt_id)
        with self._lock, self._engine.connect() as conn:
            row = conn.execute(stmt).mappings().first()
        return _row_to_receipt(row) if row is not None else None

    def create_receipt(self, data: Union[ReceiptCreate, Mapping[str, Any]]) -> Receipt:
        payload = _coerce(ReceiptCreate, data, "receipt data")

        values = {
            "id": str(uuid.uuid4()),
            "receipt_number": payload.receipt_number,
            "issued_at": payload.issued_at or _utcnow(),
            "entity": payload.entity,
            "vehicle": payload.vehicle or None,
            "staff": payload.staff,
            "branch": payload.branch,
            "payment_method": payload.payment_method.value,
            "credit_amount": format(payload.credit_amount, "f"),
            "recovery_amount": format(payload.recovery_amount, "f"),
            "total_amount": format(payload.total_amount, "f"),
            "outstanding_amount": format(payload.outstanding_amount, "f"),
            "status": payload.status.value,
            "salesman_name": payload.salesman_name,
            "salesman_photo": payload.salesman_photo,
            "salesman_message": payload.salesman_message,
            "receipt_photos": list(payload.receipt_photos),
        }

        with self._lock:
            try:
                with self._engine.begin() as conn:
                    conn.execute(receipts.insert().values(**values))
            except IntegrityError as exc:
                logger.warning(
                    "Rejected receipt: number %r already exists", payload.receipt_number
                )
                raise ValidationError(
                    f"Receipt number {payload.receipt_number!r} already exists"
                ) from exc

        logger.info("Created receipt %s (#%s)", values["id"], values["receipt_number"])
        return _row_to_receipt(values)

    def update_receipt_status(
        self, receipt_id: str, status: Union[ReceiptStatus, str]
    ) -> Optional[Receipt]:
        """
        Replace the status of one receipt, leaving every other field alone.

        Returns None when no receipt has ``receipt_id``.
        """
        try:
            new_status = ReceiptStatus(status)
        except ValueError as exc:
            logger.warning("Rejected status %r for receipt %s", status, receipt_id)
            allowed = ", ".join(s.value for s in ReceiptStatus)
            raise ValidationError(
                "Invalid status",
                details=[{"loc": ["status"], "msg": f"must be one of: {allowed}"}],
            ) from exc

        with self._lock, self._engine.begin() as conn:
            result = conn.execute(
                update(receipts)
                .where(receipts.c.id == receipt_id)
                .values(status=new_status.value)
            )
            if result.rowcount == 0:
                return None
            row = conn.execute(
                select(receipts).where(receipts.c.id == receipt_id)
            ).mappings().one()

        logger.info("Receipt %s status set to %s", receipt_id, new_status.value)
        return _row_to_receipt(row)

    def seed(self, data: Iterable[Mapping[str, Any]]) -> int:
        """Insert sample receipts; returns how many were stored."""
        n = 0
        for item in data:
            self.create_receipt(item)
            n += 1
        return n

    # ---- Schedules ----

    def list_schedules(self) -> List[Schedule]:
        stmt = select(schedules).order_by(schedules.c.seq.asc())
        with self._lock, self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [_row_to_schedule(row) for row in rows]

    def get_schedule_by_id(self, schedule_id: str) -> Optional[Schedule]:
        stmt = select(schedules).where(schedules.c.id == schedule_id)
        with self._lock, self._engine.connect() as conn:
            row = conn.execute(stmt).mappings().first()
        return _row_to_schedule(row) if row is not None else None

    def create_schedule(self, data: Union[ScheduleCreate, Mapping[str, Any]]) -> Schedule:
        payload = _coerce(ScheduleCreate, data, "schedule data")

        values = payload.model_dump(mode="json")
        values["id"] = str(uuid.uuid4())
        values["created_at"] = _utcnow()

        with self._lock, self._engine.begin() as conn:
            conn.execute(schedules.insert().values(**values))

        logger.info(
            "Created %s export schedule %s at %s",
            values["frequency"], values["id"], values["time"],
        )
        return _row_to_schedule(values)

    def update_schedule(
        self, schedule_id: str, data: Union[ScheduleUpdate, Mapping[str, Any]]
    ) -> Optional[Schedule]:
        """
        Merge the supplied fields into an existing schedule.

        Returns None when no schedule has ``schedule_id``. ``id`` and
        ``createdAt`` are immutable and rejected if present.
        """
        payload = _coerce(ScheduleUpdate, data, "schedule data")
        changes = payload.model_dump(mode="json", exclude_unset=True)

        with self._lock, self._engine.begin() as conn:
            if changes:
                result = conn.execute(
                    update(schedules)
                    .where(schedules.c.id == schedule_id)
                    .values(**changes)
                )
                if result.rowcount == 0:
                    return None
            row = conn.execute(
                select(schedules).where(schedules.c.id == schedule_id)
            ).mappings().first()

        if row is None:
            return None

        if changes:
            logger.info("Updated schedule %s: %s", schedule_id, sorted(changes))
        return _row_to_schedule(row)

    def delete_schedule(self, schedule_id: str) -> bool:
        with self._lock, self._engine.begin() as conn:
            result = conn.execute(
                delete(schedules).where(schedules.c.id == schedule_id)
            )
        deleted = result.rowcount > 0
        if deleted:
            logger.info("Deleted schedule %s", schedule_id)
        return deleted
