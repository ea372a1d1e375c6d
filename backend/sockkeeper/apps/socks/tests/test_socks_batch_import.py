from __future__ import annotations

import pytest
from sqlalchemy.exc import OperationalError

from sockkeeper.apps.socks import importer as socks_importer
from sockkeeper.apps.socks import models as socks_models
from sockkeeper.apps.socks import services as socks_services
from sockkeeper.apps.socks.errors import FileProcessingError, InvalidDataFormatError
from sockkeeper.apps.socks.store import SocksStore


def _count(db) -> int:
    return db.query(socks_models.Socks).count()


def test_import_inserts_every_row(db_session):
    imported = socks_services.process_socks_batch(
        db_session,
        content=b"red,50,100\nblue,30,200\n",
        filename="batch.csv",
    )
    db_session.commit()

    assert imported == 2
    rows = db_session.query(socks_models.Socks).order_by(socks_models.Socks.id).all()
    assert [(r.color, r.cotton_part, r.quantity) for r in rows] == [
        ("red", 50, 100),
        ("blue", 30, 200),
    ]


def test_import_never_merges_with_existing_batches(db_session):
    socks_services.register_income(db_session, color="red", cotton_part=50, quantity=5)
    db_session.commit()

    socks_services.import_socks_batch(db_session, [["red", "50", "100"]])
    db_session.commit()

    rows = db_session.query(socks_models.Socks).order_by(socks_models.Socks.id).all()
    assert [r.quantity for r in rows] == [5, 100]


def test_malformed_first_row_persists_nothing(db_session):
    with pytest.raises(FileProcessingError) as exc:
        socks_services.import_socks_batch(db_session, [["red", "50"], ["blue", "30", "200"]])
    assert "three values" in exc.value.detail
    assert _count(db_session) == 0


def test_failing_later_row_discards_earlier_rows(db_session):
    rows = [["red", "50", "100"], ["blue", "30", "200"], ["green", "x", "1"]]
    with pytest.raises(FileProcessingError) as exc:
        socks_services.import_socks_batch(db_session, rows)
    assert "numbers" in exc.value.detail
    assert _count(db_session) == 0


@pytest.mark.parametrize(
    "row, message",
    [
        (["red", "101", "10"], "Cotton part"),
        (["red", "-1", "10"], "Cotton part"),
        (["red", "50", "0"], "Quantity"),
    ],
)
def test_validation_failures_become_file_processing_errors(db_session, row, message):
    with pytest.raises(FileProcessingError) as exc:
        socks_services.import_socks_batch(db_session, [row])

    assert not isinstance(exc.value, InvalidDataFormatError)
    assert isinstance(exc.value.__cause__, InvalidDataFormatError)
    assert message in exc.value.detail
    assert _count(db_session) == 0


def test_import_accepts_cotton_part_bounds(db_session):
    socks_services.import_socks_batch(db_session, [["white", "0", "1"], ["black", "100", "1"]])
    db_session.commit()
    assert _count(db_session) == 2


def test_empty_file_is_rejected(db_session):
    with pytest.raises(FileProcessingError) as exc:
        socks_services.process_socks_batch(db_session, content=b"", filename="empty.csv")
    assert "empty" in exc.value.detail


def test_empty_record_sequence_is_rejected(db_session):
    with pytest.raises(FileProcessingError):
        socks_services.import_socks_batch(db_session, [])


def test_blank_only_file_is_rejected(db_session):
    with pytest.raises(FileProcessingError):
        socks_services.process_socks_batch(db_session, content=b"\n\n  \n")


def test_bulk_save_failure_is_reported_as_file_processing(db_session, monkeypatch):
    def _boom(self, batch):
        raise OperationalError("INSERT INTO socks", {}, Exception("disk full"))

    monkeypatch.setattr(SocksStore, "save_all", _boom)

    with pytest.raises(FileProcessingError):
        socks_services.import_socks_batch(db_session, [["red", "50", "100"]])


def test_read_csv_records_keeps_cells_verbatim_and_drops_trailing_blank_lines():
    content = "\ufeffred , 50,100\r\nblue,30,200\n\n\n".encode("utf-8")
    assert socks_importer.read_csv_records(content) == [
        ["red ", " 50", "100"],
        ["blue", "30", "200"],
    ]


def test_read_csv_records_returns_interior_blank_lines():
    assert socks_importer.read_csv_records(b"red,50,100\n\nblue,30,200\n") == [
        ["red", "50", "100"],
        [""],
        ["blue", "30", "200"],
    ]


def test_read_csv_records_keeps_quoted_commas():
    assert socks_importer.read_csv_records(b'"red, dark",50,100\n') == [["red, dark", "50", "100"]]


def test_read_csv_records_rejects_non_utf8():
    with pytest.raises(FileProcessingError):
        socks_importer.read_csv_records(b"\xff\xfe\x00r")


def test_read_csv_records_enforces_size_limit(monkeypatch):
    monkeypatch.setenv("SOCKS_IMPORT_MAX_BYTES", "8")
    with pytest.raises(FileProcessingError):
        socks_importer.read_csv_records(b"red,50,100\n")


@pytest.mark.parametrize(
    "content",
    [
        b"red,50,100\n\nblue,30,200\n",
        b"red, 50 ,100\n",
        b"red,50,100 \n",
        b"red,5_0,1_00\n",
        b"red,50.0,100\n",
        b"red,,100\n",
    ],
)
def test_loosely_formatted_files_are_rejected(db_session, content):
    with pytest.raises(FileProcessingError):
        socks_services.process_socks_batch(db_session, content=content)
    assert _count(db_session) == 0


def test_signed_integers_follow_the_usual_validation(db_session):
    socks_services.process_socks_batch(db_session, content=b"red,+50,100\n")
    db_session.commit()
    assert db_session.query(socks_models.Socks).one().cotton_part == 50

    with pytest.raises(FileProcessingError) as exc:
        socks_services.process_socks_batch(db_session, content=b"red,50,-5\n")
    assert "Quantity" in exc.value.detail


@pytest.mark.parametrize("color", ["", "   "])
def test_blank_color_row_is_rejected(db_session, color):
    with pytest.raises(FileProcessingError) as exc:
        socks_services.import_socks_batch(db_session, [["red", "50", "100"], [color, "50", "100"]])

    assert isinstance(exc.value.__cause__, InvalidDataFormatError)
    assert "Color" in exc.value.detail
    assert _count(db_session) == 0
