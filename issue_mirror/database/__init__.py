"""Database infrastructure module.

Provides database configuration, connection management and transaction
scoping for the mirror store.
"""

from .config import (
    DatabaseConfig,
    DatabasePoolConfig,
    get_database_config,
    reset_database_config,
)
from .connection import DatabaseConnectionManager
from .transactions import DatabaseTransaction, TransactionError, database_transaction

__all__ = [
    "DatabaseConfig",
    "DatabaseConnectionManager",
    "DatabasePoolConfig",
    "DatabaseTransaction",
    "TransactionError",
    "database_transaction",
    "get_database_config",
    "reset_database_config",
]
