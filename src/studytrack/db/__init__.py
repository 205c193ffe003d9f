"""Database module for SQLite persistence.

Provides:
- The Database store handle and schema initialization
- Repository functions, one module per entity group

Repository functions take an open connection; open one with
``db.connect()`` for reads or ``db.transaction()`` for writes.
"""

from studytrack.db.database import Database

__all__ = ["Database"]
