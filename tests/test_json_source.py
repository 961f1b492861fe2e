"""Tests for the JSON snapshot source and snapshot loading."""

import json
from datetime import date
from decimal import Decimal

import pytest

from billcast.domain.errors import SourceError, ValidationError
from billcast.sources import create_json_source, load_snapshot
from billcast.sources.json_file import JsonFileSource


@pytest.fixture
def write_snapshot(tmp_path):
    """Write a document to a temporary data file and return a source for it."""

    def _write(document):
        path = tmp_path / "finances.json"
        path.write_text(json.dumps(document), encoding="utf-8")
        return JsonFileSource(path)

    return _write


def test_load_sample_snapshot(snapshot_path):
    source = JsonFileSource(snapshot_path)
    source.connect()
    try:
        snapshot = load_snapshot(source)
    finally:
        source.disconnect()

    assert [bill.id for bill in snapshot.bills] == ["rent", "internet", "gym", "dentist"]
    assert [card.name for card in snapshot.credit_cards] == ["Store Card", "Visa"]
    assert snapshot.debit_cards[0].available_balance == Decimal("2500.00")
    assert snapshot.profile.income_amount == Decimal("2000")
    assert snapshot.paychecks == ()
    assert snapshot.credit_card_payments[0].card_name == "Visa"


def test_missing_collections_are_empty(write_snapshot):
    snapshot = load_snapshot(write_snapshot({}))

    assert snapshot.bills == ()
    assert snapshot.profile is None


def test_savings_payments_newest_first_and_limited(write_snapshot):
    source = write_snapshot(
        {
            "savings_payments": [
                {"id": "1", "amount": 10, "payment_date": "2024-01-01"},
                {"id": "2", "amount": 10, "payment_date": "2024-03-01"},
                {"id": "3", "amount": 10, "payment_date": "2024-02-01"},
            ]
        }
    )

    snapshot = load_snapshot(source, savings_limit=2)

    assert [p.payment_date for p in snapshot.savings_payments] == [date(2024, 3, 1), date(2024, 2, 1)]


def test_missing_file(tmp_path):
    source = JsonFileSource(tmp_path / "absent.json")

    with pytest.raises(SourceError, match="not found"):
        load_snapshot(source)


def test_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(SourceError, match="not valid JSON"):
        JsonFileSource(path).fetch_bills()


def test_document_must_be_object(write_snapshot):
    with pytest.raises(SourceError, match="must contain a JSON object"):
        write_snapshot([]).fetch_bills()


def test_collection_must_be_list(write_snapshot):
    with pytest.raises(SourceError, match="'bills' .* must be a list"):
        write_snapshot({"bills": {"id": "x"}}).fetch_bills()


def test_invalid_record_propagates(write_snapshot):
    source = write_snapshot({"bills": [{"id": "x", "amount": 1}]})

    with pytest.raises(ValidationError):
        load_snapshot(source)


def test_disconnect_rereads_file(write_snapshot):
    source = write_snapshot({"bills": []})
    assert source.fetch_bills() == []

    source.path.write_text(
        json.dumps({"bills": [{"id": "x", "amount": 1, "bill_type": "one-time"}]}),
        encoding="utf-8",
    )
    assert source.fetch_bills() == []

    source.disconnect()
    assert [bill.id for bill in source.fetch_bills()] == ["x"]


def test_factory_uses_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("BILLCAST_DATA_PATH", str(tmp_path / "env.json"))

    assert create_json_source().path == tmp_path / "env.json"
    assert create_json_source(str(tmp_path / "arg.json")).path == tmp_path / "arg.json"


def test_factory_default_path(monkeypatch):
    monkeypatch.delenv("BILLCAST_DATA_PATH", raising=False)

    path = create_json_source().path

    assert path.parts[-2:] == (".billcast", "finances.json")
