from staysync.db.init_db import drop_db, init_db
from staysync.db.session import Database, get_db

__all__ = ["Database", "get_db", "init_db", "drop_db"]
