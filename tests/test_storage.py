from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from receipt_desk.db.seed import SAMPLE_RECEIPTS, seed_sample_data
from receipt_desk.errors import ValidationError
from receipt_desk.models.enums import PaymentMethod, ReceiptStatus


def test_create_then_get_returns_same_record(storage, receipt_data):
    created = storage.create_receipt(receipt_data(receiptPhotos=["https://cdn/r1.jpg"]))

    fetched = storage.get_receipt_by_id(created.id)

    assert fetched == created
    assert fetched.receipt_number == "R-0001"
    assert fetched.receipt_photos == ["https://cdn/r1.jpg"]


def test_create_fills_defaults(storage, receipt_data):
    data = receipt_data()
    del data["datetime"]
    del data["vehicle"]

    before = datetime.now(timezone.utc)
    receipt = storage.create_receipt(data)

    assert receipt.id
    assert receipt.status == ReceiptStatus.COMPLETED
    assert receipt.credit_amount == Decimal("0")
    assert receipt.recovery_amount == Decimal("0")
    assert receipt.outstanding_amount == Decimal("0")
    assert receipt.vehicle is None
    assert receipt.receipt_photos == []
    assert receipt.issued_at >= before.replace(microsecond=0)


def test_create_generates_unique_ids(storage, receipt_data):
    first = storage.create_receipt(receipt_data())
    second = storage.create_receipt(receipt_data())
    assert first.id != second.id


@pytest.mark.parametrize(
    "overrides",
    [
        {"paymentMethod": "cheque"},
        {"status": "archived"},
        {"totalAmount": "-5"},
        {"creditAmount": "1.234"},
        {"entity": ""},
    ],
)
def test_create_rejects_invalid_data(storage, receipt_data, overrides):
    with pytest.raises(ValidationError):
        storage.create_receipt(receipt_data(**overrides))
    assert storage.list_receipts() == []


def test_create_rejects_missing_required_field(storage, receipt_data):
    data = receipt_data()
    del data["salesmanName"]
    with pytest.raises(ValidationError) as excinfo:
        storage.create_receipt(data)
    assert any(d["loc"] == ["salesmanName"] for d in excinfo.value.details)


def test_receipt_number_is_unique(storage, receipt_data):
    storage.create_receipt(receipt_data(receiptNumber="100"))
    with pytest.raises(ValidationError):
        storage.create_receipt(receipt_data(receiptNumber="100"))
    assert len(storage.list_receipts()) == 1


def test_list_sorted_most_recent_first(storage, receipt_data):
    storage.create_receipt(receipt_data(receiptNumber="old", datetime=datetime(2025, 1, 1)))
    storage.create_receipt(receipt_data(receiptNumber="new", datetime=datetime(2025, 3, 1)))
    storage.create_receipt(receipt_data(receiptNumber="mid", datetime=datetime(2025, 2, 1)))

    numbers = [r.receipt_number for r in storage.list_receipts()]

    assert numbers == ["new", "mid", "old"]


def test_ties_keep_insertion_order(storage, receipt_data):
    same = datetime(2025, 5, 5, 12, 0)
    for number in ("a", "b", "c"):
        storage.create_receipt(receipt_data(receiptNumber=number, datetime=same))

    first = [r.receipt_number for r in storage.list_receipts()]
    second = [r.receipt_number for r in storage.list_receipts()]

    assert first == ["a", "b", "c"]
    assert first == second


def test_date_bounds_are_inclusive(storage, receipt_data):
    t1, t2, t3 = datetime(2025, 8, 1, 9), datetime(2025, 8, 2, 9), datetime(2025, 8, 3, 9)
    for number, ts in (("t1", t1), ("t2", t2), ("t3", t3)):
        storage.create_receipt(receipt_data(receiptNumber=number, datetime=ts))

    from_t2 = [r.receipt_number for r in storage.list_receipts({"dateFrom": t2})]
    to_t2 = [r.receipt_number for r in storage.list_receipts({"dateTo": t2})]
    only_t2 = [r.receipt_number for r in storage.list_receipts({"dateFrom": t2, "dateTo": t2})]

    assert from_t2 == ["t3", "t2"]
    assert to_t2 == ["t2", "t1"]
    assert only_t2 == ["t2"]


def test_date_filter_accepts_iso_strings(storage, receipt_data):
    storage.create_receipt(receipt_data(receiptNumber="a", datetime=datetime(2025, 8, 20, 10, 30)))
    storage.create_receipt(receipt_data(receiptNumber="b", datetime=datetime(2025, 8, 22, 9, 45)))

    # a bare date is midnight of that day
    result = storage.list_receipts({"dateFrom": "2025-08-21", "dateTo": "2025-08-22T23:59:59"})

    assert [r.receipt_number for r in result] == ["b"]


def test_search_is_case_insensitive_substring(storage, receipt_data):
    storage.create_receipt(receipt_data(receiptNumber="1", entity="Ali Transport"))
    storage.create_receipt(receipt_data(receiptNumber="2", entity="City Logistics", staff="Sara"))

    result = storage.list_receipts({"search": "ali"})

    assert [r.entity for r in result] == ["Ali Transport"]


@pytest.mark.parametrize(
    "search, expected",
    [
        ("5678", ["56789"]),
        ("hamza", ["56789"]),
        ("xyz-4", ["56790"]),
        ("branch", []),
    ],
)
def test_search_covers_number_entity_staff_vehicle(storage, search, expected):
    seed_sample_data(storage)
    result = storage.list_receipts({"search": search})
    assert [r.receipt_number for r in result] == expected


def test_search_skips_missing_vehicle(storage, receipt_data):
    storage.create_receipt(receipt_data(receiptNumber="1", vehicle=None))
    storage.create_receipt(receipt_data(receiptNumber="2", vehicle="LHR-777"))

    result = storage.list_receipts({"search": "lhr"})

    assert [r.receipt_number for r in result] == ["2"]


def test_search_treats_wildcards_literally(storage, receipt_data):
    storage.create_receipt(receipt_data(receiptNumber="1"))
    assert storage.list_receipts({"search": "%"}) == []
    assert storage.list_receipts({"search": "_"}) == []


def test_all_sentinel_equals_omitted_filter(storage):
    seed_sample_data(storage)

    unfiltered = storage.list_receipts()
    with_all = storage.list_receipts(
        {"paymentMethod": "all", "status": "all", "entity": "all"}
    )
    with_blanks = storage.list_receipts(
        {"search": "", "dateFrom": "", "dateTo": "", "paymentMethod": "", "status": "", "entity": ""}
    )

    assert len(unfiltered) == 4
    assert with_all == unfiltered
    assert with_blanks == unfiltered


def test_exact_match_filters_combine_with_and(storage):
    seed_sample_data(storage)

    credit = storage.list_receipts({"paymentMethod": "credit"})
    credit_overdue = storage.list_receipts({"paymentMethod": "credit", "status": "overdue"})
    by_entity = storage.list_receipts({"entity": "City Logistics"})
    partial_entity = storage.list_receipts({"entity": "City"})

    assert [r.receipt_number for r in credit] == ["56790", "56792"]
    assert [r.receipt_number for r in credit_overdue] == ["56792"]
    assert [r.receipt_number for r in by_entity] == ["56791"]
    assert partial_entity == []


def test_unknown_enum_filter_is_rejected(storage):
    with pytest.raises(ValidationError):
        storage.list_receipts({"status": "archived"})
    with pytest.raises(ValidationError):
        storage.list_receipts({"paymentMethod": "cheque"})


def test_count_matches_list(storage):
    seed_sample_data(storage)
    assert storage.count_receipts() == 4
    assert storage.count_receipts({"status": "completed"}) == 2
    assert storage.count_receipts({"search": "nobody"}) == 0


def test_list_entities_is_distinct_and_sorted(storage, receipt_data):
    seed_sample_data(storage)
    storage.create_receipt(receipt_data(receiptNumber="extra", entity="Ali Transport"))

    assert storage.list_entities() == [
        "Ali Transport",
        "City Logistics",
        "Express Delivery",
        "Khan Industries",
    ]


def test_update_status_changes_only_status(storage, receipt_data):
    created = storage.create_receipt(receipt_data())

    updated = storage.update_receipt_status(created.id, "overdue")

    assert updated.status == ReceiptStatus.OVERDUE
    assert updated.model_dump(exclude={"status"}) == created.model_dump(exclude={"status"})
    assert storage.get_receipt_by_id(created.id) == updated


def test_update_status_rejects_invalid_value(storage, receipt_data):
    created = storage.create_receipt(receipt_data(status="pending"))

    with pytest.raises(ValidationError):
        storage.update_receipt_status(created.id, "foo")

    assert storage.get_receipt_by_id(created.id).status == ReceiptStatus.PENDING


def test_update_status_of_missing_receipt(storage):
    assert storage.update_receipt_status("missing", ReceiptStatus.COMPLETED) is None


def test_get_missing_receipt(storage):
    assert storage.get_receipt_by_id("missing") is None


def test_seed_sample_data_only_fills_empty_store(storage):
    assert seed_sample_data(storage) == len(SAMPLE_RECEIPTS)
    assert seed_sample_data(storage) == 0
    assert storage.count_receipts() == len(SAMPLE_RECEIPTS)
    assert {r.payment_method for r in storage.list_receipts()} == set(PaymentMethod)


@pytest.mark.parametrize("search", ["öz", "ÖZ", "Öztürk", "école", "ÉCOLE", "taşımacılık"])
def test_search_folds_non_ascii_case(storage, receipt_data, search):
    storage.create_receipt(receipt_data(receiptNumber="1", entity="Öztürk Taşımacılık"))
    storage.create_receipt(receipt_data(receiptNumber="2", entity="ÉCOLE Logistics"))

    result = [r.receipt_number for r in storage.list_receipts({"search": search})]

    expected = ["2"] if "cole" in search.lower() else ["1"]
    assert result == expected


@pytest.mark.parametrize(
    "raw, expected",
    [("1e3", "1000"), ("-0", "0"), ("-0.00", "0.00"), ("12.50", "12.50"), ("2.5E+1", "25")],
)
def test_amounts_are_stored_as_plain_decimals(storage, receipt_data, raw, expected):
    receipt = storage.create_receipt(receipt_data(totalAmount=raw, creditAmount=raw))

    fetched = storage.get_receipt_by_id(receipt.id)

    assert str(fetched.total_amount) == expected
    assert str(fetched.credit_amount) == expected


def test_timestamps_come_back_as_utc(storage, receipt_data):
    receipt = storage.create_receipt(
        receipt_data(datetime=datetime.fromisoformat("2025-08-20T15:30:00+05:00"))
    )

    fetched = storage.get_receipt_by_id(receipt.id)

    assert fetched.issued_at == datetime(2025, 8, 20, 10, 30, tzinfo=timezone.utc)
    assert fetched.issued_at.tzinfo is not None


def test_concurrent_creates_are_all_stored(storage, receipt_data):
    payloads = [receipt_data() for _ in range(40)]

    with ThreadPoolExecutor(max_workers=8) as pool:
        created = list(pool.map(storage.create_receipt, payloads))

    assert storage.count_receipts() == 40
    assert len({r.id for r in created}) == 40


def test_concurrent_status_updates_leave_one_consistent_value(storage, receipt_data):
    receipt = storage.create_receipt(receipt_data())
    statuses = ["pending", "overdue", "completed"] * 10

    with ThreadPoolExecutor(max_workers=6) as pool:
        results = list(pool.map(lambda s: storage.update_receipt_status(receipt.id, s), statuses))

    final = storage.get_receipt_by_id(receipt.id)
    assert all(r is not None for r in results)
    assert final.status in set(ReceiptStatus)
    assert final.model_dump(exclude={"status"}) == receipt.model_dump(exclude={"status"})
