"""
SQLAlchemy table descriptions for the staging (landing) tables.

Models:
    base: Shared metadata and the ImportKind enum
    landing: Landing tables built from the canonical field lists

The landing tables are owned by the database; these descriptions are used
to create equivalent tables in a development database.

Usage:
    from models.base import ImportKind
    from models.landing import prices_landing, multipliers_landing
"""

__all__ = [
    "metadata",
    "ImportKind",
    "landing_table",
    "prices_landing",
    "multipliers_landing",
]
