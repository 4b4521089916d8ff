"""Data sources feeding the load calculators."""
from .base import AuthorizationOption, DataSource
from .database import DatabaseDataSource
from .memory import InMemoryDataSource

__all__ = ["AuthorizationOption", "DataSource", "DatabaseDataSource", "InMemoryDataSource"]
