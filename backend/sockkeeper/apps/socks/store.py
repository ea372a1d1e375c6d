from __future__ import annotations

from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from . import models


class SocksStore:
    """Keyed persistence over ``socks`` rows, bound to one session.

    Everything goes through ``flush`` so that a saved row is visible to the
    following lookups of the same operation; committing is left to the caller.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def find_by_key(
        self,
        color: str,
        cotton_part: int,
        *,
        for_update: bool = False,
    ) -> Optional[models.Socks]:
        query = (
            self.db.query(models.Socks)
            .filter(
                models.Socks.color == color,
                models.Socks.cotton_part == cotton_part,
            )
            .order_by(models.Socks.id.asc())
        )
        if for_update:
            query = query.with_for_update()
        return query.first()

    def find_by_id(self, socks_id: int, *, for_update: bool = False) -> Optional[models.Socks]:
        query = self.db.query(models.Socks).filter(models.Socks.id == socks_id)
        if for_update:
            query = query.with_for_update()
        return query.first()

    def save(self, socks: models.Socks) -> models.Socks:
        self.db.add(socks)
        self.db.flush()
        return socks

    def save_all(self, batch: Iterable[models.Socks]) -> List[models.Socks]:
        rows = list(batch)
        self.db.add_all(rows)
        self.db.flush()
        return rows

    def find_all(
        self,
        *,
        color: Optional[str] = None,
        min_cotton_part: Optional[int] = None,
        max_cotton_part: Optional[int] = None,
    ) -> List[models.Socks]:
        query = self.db.query(models.Socks)
        if color is not None:
            query = query.filter(models.Socks.color == color)
        if min_cotton_part is not None:
            query = query.filter(models.Socks.cotton_part >= min_cotton_part)
        if max_cotton_part is not None:
            query = query.filter(models.Socks.cotton_part <= max_cotton_part)
        return query.order_by(models.Socks.id.asc()).all()
