"""Community book-sharing library: records, rules, SQLite storage and Flask handlers."""

__version__ = "0.1.0"