from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import models, schemas
from .errors import (
    FileProcessingError,
    InsufficientSocksError,
    InvalidDataFormatError,
    SocksNotFoundError,
)
from .importer import read_csv_records
from .store import SocksStore

logger = logging.getLogger(__name__)

SORT_BY_COLOR = "color"
SORT_BY_COTTON_PART = "cottonPart"
SORT_KEYS = (SORT_BY_COLOR, SORT_BY_COTTON_PART)

BATCH_FIELD_COUNT = 3
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _validate_color(color: str) -> None:
    if not color or not color.strip():
        logger.error("Color must not be blank, got %r", color)
        raise InvalidDataFormatError("Color must not be blank.")


def _validate_quantity(quantity: int) -> None:
    if quantity <= 0:
        logger.error("Quantity must be positive, got %s", quantity)
        raise InvalidDataFormatError("Quantity must be positive.")


def _validate_cotton_part(cotton_part: int) -> None:
    if cotton_part < models.MIN_COTTON_PART or cotton_part > models.MAX_COTTON_PART:
        logger.error("Cotton part must be within 0-100, got %s", cotton_part)
        raise InvalidDataFormatError("Cotton part must be within 0-100.")


def _to_read(socks: models.Socks) -> schemas.SocksRead:
    return schemas.SocksRead.model_validate(socks)


# ---------------------------------------------------------------------------
# Income / outcome
# ---------------------------------------------------------------------------


def register_income(db: Session, *, color: str, cotton_part: int, quantity: int) -> None:
    logger.debug("Registering income: color=%s cotton_part=%s quantity=%s", color, cotton_part, quantity)
    _validate_color(color)
    _validate_quantity(quantity)
    _validate_cotton_part(cotton_part)

    store = SocksStore(db)
    existing = store.find_by_key(color, cotton_part, for_update=True)
    if existing is not None:
        logger.debug(
            "Topping up existing socks: color=%s cotton_part=%s current quantity=%s",
            color,
            cotton_part,
            existing.quantity,
        )
        existing.quantity = existing.quantity + quantity
        store.save(existing)
        logger.info("Socks id=%s quantity is now %s", existing.id, existing.quantity)
        return

    created = store.save(models.Socks(color=color, cotton_part=cotton_part, quantity=quantity))
    logger.debug("Created socks id=%s color=%s cotton_part=%s quantity=%s", created.id, color, cotton_part, quantity)


def register_outcome(db: Session, *, color: str, cotton_part: int, quantity: int) -> None:
    logger.debug("Registering outcome: color=%s cotton_part=%s quantity=%s", color, cotton_part, quantity)
    _validate_color(color)
    _validate_quantity(quantity)
    _validate_cotton_part(cotton_part)

    store = SocksStore(db)
    existing = store.find_by_key(color, cotton_part, for_update=True)
    if existing is None:
        logger.error("Socks not found: color=%s cotton_part=%s", color, cotton_part)
        raise SocksNotFoundError("Socks with the given parameters were not found.")

    if existing.quantity < quantity:
        logger.error(
            "Not enough socks in stock: requested=%s available=%s",
            quantity,
            existing.quantity,
        )
        raise InsufficientSocksError("Not enough socks in stock for this operation.")

    existing.quantity = existing.quantity - quantity
    store.save(existing)
    logger.debug("Outcome done: color=%s cotton_part=%s remaining=%s", color, cotton_part, existing.quantity)


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


def list_socks(
    db: Session,
    *,
    color: Optional[str] = None,
    min_cotton_part: Optional[int] = None,
    max_cotton_part: Optional[int] = None,
    sort_by: Optional[str] = None,
) -> List[schemas.SocksRead]:
    logger.debug(
        "Listing socks: color=%s min_cotton_part=%s max_cotton_part=%s sort_by=%s",
        color,
        min_cotton_part,
        max_cotton_part,
        sort_by,
    )
    if sort_by is not None and sort_by.strip() and sort_by not in SORT_KEYS:
        logger.warning("Unsupported sort_by value: %s", sort_by)
        raise InvalidDataFormatError(
            "Unsupported sortBy value. Allowed values: color, cottonPart."
        )

    rows = SocksStore(db).find_all(
        color=color if color and color.strip() else None,
        min_cotton_part=min_cotton_part,
        max_cotton_part=max_cotton_part,
    )

    # sorted() is stable, so ties keep the store order.
    if sort_by == SORT_BY_COLOR:
        rows = sorted(rows, key=lambda socks: socks.color)
    elif sort_by == SORT_BY_COTTON_PART:
        rows = sorted(rows, key=lambda socks: socks.cotton_part)

    result = [_to_read(socks) for socks in rows]
    logger.debug("Found %s socks rows", len(result))
    return result


# ---------------------------------------------------------------------------
# Corrections
# ---------------------------------------------------------------------------


def update_socks(
    db: Session,
    socks_id: int,
    *,
    color: str,
    cotton_part: int,
    quantity: int,
) -> schemas.SocksRead:
    logger.debug(
        "Updating socks id=%s: color=%s cotton_part=%s quantity=%s",
        socks_id,
        color,
        cotton_part,
        quantity,
    )
    _validate_color(color)
    _validate_cotton_part(cotton_part)
    _validate_quantity(quantity)

    store = SocksStore(db)
    socks = store.find_by_id(socks_id, for_update=True)
    if socks is None:
        logger.error("Socks id=%s not found", socks_id)
        raise SocksNotFoundError("Socks with the given id were not found.")

    logger.debug("Previous socks state: %r", socks)
    socks.color = color
    socks.cotton_part = cotton_part
    socks.quantity = quantity
    store.save(socks)
    logger.debug("Socks updated: %r", socks)
    return _to_read(socks)


# ---------------------------------------------------------------------------
# Batch import
# ---------------------------------------------------------------------------


def _parse_batch_line(line: Sequence[str]) -> models.Socks:
    if len(line) != BATCH_FIELD_COUNT:
        logger.error("Malformed batch line: %s", list(line))
        raise FileProcessingError(
            "Each line must contain three values: color, cotton part, quantity."
        )

    color = line[0]
    if not all(_INTEGER_RE.fullmatch(cell) for cell in line[1:]):
        logger.error("Non-numeric values in batch line: %s", list(line))
        raise FileProcessingError("Cotton part and quantity must be numbers.")
    cotton_part = int(line[1])
    quantity = int(line[2])

    try:
        _validate_color(color)
        _validate_cotton_part(cotton_part)
        _validate_quantity(quantity)
    except InvalidDataFormatError as exc:
        raise FileProcessingError(f"Error while processing file: {exc.detail}") from exc

    return models.Socks(color=color, cotton_part=cotton_part, quantity=quantity)


def import_socks_batch(db: Session, rows: Iterable[Sequence[str]]) -> List[models.Socks]:
    """
    Insert every row as a new socks batch, or nothing at all.

    Rows never merge into existing batches with the same color/cotton_part;
    the first bad row aborts the whole import before anything is saved.
    """
    lines = list(rows)
    if not lines:
        logger.error("Batch file is empty")
        raise FileProcessingError("File cannot be empty.")

    batch = [_parse_batch_line(line) for line in lines]

    try:
        saved = SocksStore(db).save_all(batch)
    except SQLAlchemyError as exc:
        logger.error("Failed to save socks batch: %s", exc, exc_info=True)
        raise FileProcessingError(f"Error while processing file: {exc}") from exc

    logger.info("Imported %s socks rows", len(saved))
    return saved


def process_socks_batch(db: Session, *, content: bytes, filename: Optional[str] = None) -> int:
    logger.debug("Processing socks batch file: filename=%s size=%s", filename, len(content))
    if not content:
        logger.error("Batch file %s is empty", filename)
        raise FileProcessingError("File cannot be empty.")

    records = read_csv_records(content)
    return len(import_socks_batch(db, records))
