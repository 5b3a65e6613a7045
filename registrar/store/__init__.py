"""
Record Store

Keyed, authoritative storage for academic entities.
"""

from registrar.store.record_store import GENERATED_ID_KINDS, EntityKind, RecordStore

__all__ = [
    "EntityKind",
    "GENERATED_ID_KINDS",
    "RecordStore",
]
