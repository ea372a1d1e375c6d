"""
Socks module.

Handles the sock stock ledger: income, outcome, listing, corrections and
bulk CSV imports. The HTTP router lives in ``sockkeeper.apps.socks.router``.
"""

from . import models  # noqa: F401
