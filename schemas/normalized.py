"""
Canonical field sets for the staging (landing) tables.

Each import kind declares:
    - the allow-list of canonical columns its staging table accepts
    - the columns a file must provide for the import to proceed
    - the columns stored as integers (price imports only)
"""

from typing import Dict, FrozenSet, List, Optional, Tuple, Union
from models.base import ImportKind

# A record after sanitization: canonical field -> text, integer or NULL
SanitizedRecord = Dict[str, Optional[Union[str, int]]]
NormalizedRecord = Dict[str, Optional[str]]


# ============================================================================
# Price / catalog imports
# ============================================================================

PRICE_FIELDS: Tuple[str, ...] = (
    "brand",
    "category",
    "model",
    "submodel",
    "variant",
    "year",
    "storage_gb",
    "connectivity",
    "cpu",
    "ram_gb",
    "ssd_gb",
    "base_price",
    "image_url",
)

PRICE_INTEGER_FIELDS: FrozenSet[str] = frozenset({"year", "storage_gb", "ram_gb", "ssd_gb"})


# ============================================================================
# Multiplier imports
# ============================================================================

# Condition questions and the options offered for each, in display order
QUESTION_OPTIONS: Dict[str, Tuple[str, ...]] = {
    "functional": ("ja", "neen", "klein"),
    "screen": ("geen", "klein", "groot"),
    "housing": ("minimaal", "sporen", "zwaar"),
    "battery": ("100", "gt85", "le85", "unknown"),
    "eu": ("yes", "no"),
    "icloud": ("yes", "no"),
}

# Delivery and payment choices that carry a per-model tip
TIP_KEYS: Tuple[str, ...] = (
    "ship_opzenden",
    "ship_binnenbrengen",
    "store_gentbrugge",
    "store_antwerpen",
    "store_oudenaarde",
    "pay_bank",
    "pay_voucher",
)


def _multiplier_fields() -> Tuple[str, ...]:
    fields: List[str] = ["model"]
    for question, options in QUESTION_OPTIONS.items():
        fields.append(f"{question}_title")
        for option in options:
            fields.append(f"{question}_{option}")
            fields.append(f"{question}_{option}_label")
            fields.append(f"{question}_{option}_tip")
    fields.extend(f"{key}_tip" for key in TIP_KEYS)
    return tuple(fields)


MULTIPLIER_FIELDS: Tuple[str, ...] = _multiplier_fields()


# ============================================================================
# Lookups by kind
# ============================================================================

ALLOWED_FIELDS: Dict[ImportKind, FrozenSet[str]] = {
    ImportKind.PRICES: frozenset(PRICE_FIELDS),
    ImportKind.MULTIPLIERS: frozenset(MULTIPLIER_FIELDS),
}

REQUIRED_FIELDS: Dict[ImportKind, Tuple[str, ...]] = {
    ImportKind.PRICES: ("brand", "model", "storage_gb", "base_price"),
    ImportKind.MULTIPLIERS: ("model",),
}

INTEGER_FIELDS: Dict[ImportKind, FrozenSet[str]] = {
    ImportKind.PRICES: PRICE_INTEGER_FIELDS,
    ImportKind.MULTIPLIERS: frozenset(),
}

FIELD_ORDER: Dict[ImportKind, Tuple[str, ...]] = {
    ImportKind.PRICES: PRICE_FIELDS,
    ImportKind.MULTIPLIERS: MULTIPLIER_FIELDS,
}
