"""
Local database layer (SQLAlchemy).

- database: engine factory, session_scope, init_db
- models: declarative tables mirroring the hosted schema
- store: SqlBackend store and JSON seeding
"""

from tensemaster.db.database import create_db_engine, get_engine, init_db, session_scope
from tensemaster.db.store import SqlBackend, seed_from_json

__all__ = [
    "SqlBackend",
    "create_db_engine",
    "get_engine",
    "init_db",
    "seed_from_json",
    "session_scope",
]
