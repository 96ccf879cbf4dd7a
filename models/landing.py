from sqlalchemy import Column, Integer, Table, Text
from models.base import metadata, ImportKind
from schemas.normalized import FIELD_ORDER, INTEGER_FIELDS


def _landing_table(name: str, kind: ImportKind) -> Table:
    """
    Describe a landing table for a given import kind.

    The production tables are owned by the database (and read by the
    transform procedures); this description mirrors their columns so a
    development database can be created with the same shape.
    """
    integer_fields = INTEGER_FIELDS[kind]
    columns = [
        Column(field, Integer if field in integer_fields else Text, nullable=True)
        for field in FIELD_ORDER[kind]
    ]
    return Table(name, metadata, *columns)


def landing_table(name: str, kind: ImportKind) -> Table:
    """Return the landing table registered under ``name``, defining it on first use"""
    existing = metadata.tables.get(name)
    if existing is not None:
        return existing
    return _landing_table(name, kind)


prices_landing = landing_table("buyback_prices_landing", ImportKind.PRICES)
multipliers_landing = landing_table("buyback_multipliers_landing", ImportKind.MULTIPLIERS)
