from __future__ import annotations

from sqlalchemy import (
    CheckConstraint,
    Column,
    Index,
    Integer,
    String,
)

from sockkeeper.database import Base

MIN_COTTON_PART = 0
MAX_COTTON_PART = 100


class Socks(Base):
    __tablename__ = "socks"
    __table_args__ = (
        CheckConstraint(
            f"cotton_part >= {MIN_COTTON_PART} AND cotton_part <= {MAX_COTTON_PART}",
            name="ck_socks_cotton_part_range",
        ),
        CheckConstraint("quantity >= 0", name="ck_socks_quantity_non_negative"),
        # Not unique: imports and corrections may leave several rows per key.
        Index("ix_socks_color_cotton_part", "color", "cotton_part"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    color = Column(String(64), nullable=False)
    cotton_part = Column(Integer, nullable=False)
    quantity = Column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return (
            f"Socks(id={self.id!r}, color={self.color!r}, "
            f"cotton_part={self.cotton_part!r}, quantity={self.quantity!r})"
        )
