"""
Storage backends and the request dependency that selects one
"""
from fastapi import Depends
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.storage.base import Storage
from app.storage.memory_storage import MemoryStorage
from app.storage.sql_storage import DatabaseStorage

# Process-wide instance used when STORAGE_BACKEND=memory
memory_storage = MemoryStorage()


def get_storage(db: Session = Depends(get_db)) -> Storage:
    """Storage for the current request, chosen by STORAGE_BACKEND"""
    if settings.STORAGE_BACKEND == "memory":
        return memory_storage
    return DatabaseStorage(db)


__all__ = ["Storage", "DatabaseStorage", "MemoryStorage", "memory_storage", "get_storage"]
