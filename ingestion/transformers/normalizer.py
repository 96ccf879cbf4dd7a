"""
Transform parsed CSV rows into sanitized staging records
"""

from typing import Dict, List, Optional, Sequence
import logging
import re
import unicodedata

from core.exceptions import MissingColumnsError
from ingestion.extractors.csv_extractor import ParsedTable
from models.base import ImportKind
from schemas.normalized import (
    ALLOWED_FIELDS,
    INTEGER_FIELDS,
    REQUIRED_FIELDS,
    NormalizedRecord,
    SanitizedRecord,
)

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_NON_INTEGER_CHARS = re.compile(r"[^0-9-]")


# Synonyms seen in supplier and export files -> canonical field name
_ALIAS_GROUPS: Dict[str, Sequence[str]] = {
    "storage_gb": ("storage", "capacity", "capacity_gb", "geheugen", "opslag", "gb"),
    "base_price": ("price", "base_price", "buyback_price", "prijs", "amount"),
    "year": ("jaar", "bouwjaar", "release_year"),
    "ram_gb": ("ram", "memory", "werkgeheugen"),
    "ssd_gb": ("ssd", "ssd_capacity", "disk", "schijf"),
    "image_url": ("image", "img", "afbeelding", "foto", "photo", "image_link"),
    "brand": ("merk", "manufacturer"),
    "category": ("categorie",),
    "variant": ("variatie",),
}

KEY_ALIASES: Dict[str, str] = {
    alias: canonical
    for canonical, aliases in _ALIAS_GROUPS.items()
    for alias in aliases
}


def normalize_key(raw: str) -> str:
    """
    Map a raw header cell to its canonical field name.

    Lower-cases, strips diacritics, collapses every run of non-alphanumeric
    characters into one underscore and resolves known synonyms.

    >>> normalize_key("Capacity (GB)")
    'storage_gb'
    """
    decomposed = unicodedata.normalize("NFKD", raw.lower())
    ascii_only = "".join(char for char in decomposed if not unicodedata.combining(char))
    key = _NON_ALNUM.sub("_", ascii_only).strip("_")
    return KEY_ALIASES.get(key, key)


def normalize_header(header: Sequence[str]) -> List[str]:
    """Canonical names, positionally aligned with ``header``"""
    return [normalize_key(cell) for cell in header]


def parse_integer(value: Optional[str]) -> Optional[int]:
    """
    Coerce a loosely formatted number to an integer.

    Every character other than digits and '-' is dropped ("128GB" -> 128).
    Returns None when nothing usable remains; never raises.
    """
    if value is None or value == "":
        return None
    cleaned = _NON_INTEGER_CHARS.sub("", str(value))
    if cleaned in ("", "-"):
        return None
    try:
        return int(cleaned, 10)
    except ValueError:
        return None


class RecordNormalizer:
    """
    Normalize parsed rows for one import kind.

    Handles:
    - Header normalization and alias resolution
    - Required column validation
    - Allow-list filtering
    - Type coercion of integer columns
    """

    def __init__(self, kind: ImportKind):
        self.kind = kind
        self.allowed_fields = ALLOWED_FIELDS[kind]
        self.required_fields = REQUIRED_FIELDS[kind]
        self.integer_fields = INTEGER_FIELDS[kind]

    def validate_header(self, table: ParsedTable) -> List[str]:
        """
        Check that every required column is present.

        Returns:
            The normalized header

        Raises:
            MissingColumnsError: listing missing fields and the detected headers
        """
        normalized = normalize_header(table.header)
        present = set(normalized)
        missing = [name for name in self.required_fields if name not in present]
        if missing:
            raise MissingColumnsError(
                missing=missing,
                headers=table.header,
                normalized_headers=normalized,
                delimiter=table.delimiter,
            )
        return normalized

    def build_record(self, normalized_header: Sequence[str], row: Sequence[str]) -> NormalizedRecord:
        """Zip a row with the header, keeping only allow-listed fields"""
        record: NormalizedRecord = {}
        for name, value in zip(normalized_header, row):
            if name in self.allowed_fields:
                record[name] = value
        return record

    def sanitize(self, record: NormalizedRecord) -> SanitizedRecord:
        """Empty strings become None; integer columns are coerced"""
        sanitized: SanitizedRecord = {}
        for name, value in record.items():
            if name in self.integer_fields:
                sanitized[name] = parse_integer(value)
            elif value == "":
                sanitized[name] = None
            else:
                sanitized[name] = value
        return sanitized

    def normalize(self, table: ParsedTable) -> List[SanitizedRecord]:
        """
        Validate the header and turn every row into a staging record.

        Returns:
            One sanitized record per data row, in row order
        """
        normalized_header = self.validate_header(table)

        ignored = sorted(
            {name for name in normalized_header if name not in self.allowed_fields}
        )
        if ignored:
            logger.info(f"Ignoring columns not accepted for {self.kind.value}: {', '.join(ignored)}")

        records = [
            self.sanitize(self.build_record(normalized_header, row))
            for row in table.rows
        ]
        logger.info(f"Normalized {len(records)} {self.kind.value} records")
        return records
