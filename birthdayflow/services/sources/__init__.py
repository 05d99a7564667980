"""Row sources for the birthday sheet."""

from .base import RowSource, Rows, StaticRowSource
from .table_file import TableFileSource

__all__ = ["RowSource", "Rows", "StaticRowSource", "TableFileSource"]
