from sqlalchemy import MetaData
import enum

metadata = MetaData()


# ============================================================================
# ENUMS
# ============================================================================

class ImportKind(str, enum.Enum):
    """Import categories; each selects a staging table, allow-list and procedure"""
    PRICES = "prices"
    MULTIPLIERS = "multipliers"
