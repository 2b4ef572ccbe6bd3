"""
Database adapters for engine contracts (learning_engine.store.PathRepository).
"""

from infra.db.sql_path_store import SqlPathRepository

__all__ = ["SqlPathRepository"]
