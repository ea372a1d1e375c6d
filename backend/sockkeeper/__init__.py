# backend/sockkeeper/__init__.py
"""
SockKeeper: warehouse ledger for sock batches.

ORM models live in sockkeeper/apps/*/models.py; importing them here keeps
Alembic and Base.metadata.create_all() aware of every table.
"""

from .apps.socks import models as socks_models  # socks batches

__all__ = [
    "socks_models",
]
