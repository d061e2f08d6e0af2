"""Tenant statement construction."""

from .builder import StatementBuilder, build_statement, build_statements

__all__ = [
    "StatementBuilder",
    "build_statement",
    "build_statements",
]
