"""softgraph — soft-deleted directed graph on SQLite."""

__version__ = "0.1.0"
