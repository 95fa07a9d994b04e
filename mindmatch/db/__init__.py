"""
Database module - table specs, engine and record stores.
"""
from mindmatch.db.schema import TABLES, create_schema
from mindmatch.db.stores import InMemoryRecordStore, RecordStore, SqlRecordStore, build_record_stores

__all__ = [
    "TABLES",
    "create_schema",
    "RecordStore",
    "InMemoryRecordStore",
    "SqlRecordStore",
    "build_record_stores",
]
