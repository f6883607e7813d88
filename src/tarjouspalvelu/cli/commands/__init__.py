"""CLI command modules."""

from . import companies, notices, tenders

__all__ = [
    "companies",
    "notices",
    "tenders",
]
