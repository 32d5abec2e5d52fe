"""
PostgreSQL persistence: connection pool, SQL builder and the generic
Create / Find / FindByPk operation contract.
"""

from .operations import Create, DatabaseHandle, Find, FindByPk, Repository, parse_identity
from .service import PostgresService
from .sql_builder import TableMapping, build_insert, build_select, build_select_by_pk

__all__ = [
    "Create",
    "DatabaseHandle",
    "Find",
    "FindByPk",
    "PostgresService",
    "Repository",
    "TableMapping",
    "build_insert",
    "build_select",
    "build_select_by_pk",
    "parse_identity",
]
