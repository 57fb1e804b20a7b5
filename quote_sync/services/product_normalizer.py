"""
Product name normalization.

Quote products and invoice line items are free text ("Unleaded 87", "REGULAR",
"Premium 91 Ethanol Free"). Both sides are mapped to a canonical product code
before comparison so that aliases and casing cancel out.

Rules are evaluated in order and the first match wins, so more specific
products (DEF before diesel, dyed before clear diesel, 93 before premium)
come first.
"""
import re

PRODUCT_NAME_RULES: tuple[tuple[re.Pattern, str], ...] = (
    (re.compile(r"\b(?:def|diesel exhaust fluid)\b"), "def"),
    (re.compile(r"\b(?:dyed|red|off[- ]?road)\b.*\bdiesel\b"), "dyed diesel"),
    (re.compile(r"\bdiesel\b.*\b(?:dyed|red|off[- ]?road)\b"), "dyed diesel"),
    (re.compile(r"\b(?:diesel|ulsd)\b"), "diesel"),
    (re.compile(r"\b(?:e85|flex[- ]?fuel)\b"), "e85"),
    (re.compile(r"\b(?:93|super premium)\b"), "93"),
    (re.compile(r"\b(?:91|premium|super)\b"), "91"),
    (re.compile(r"\b(?:89|plus|mid[- ]?grade)\b"), "89"),
    (re.compile(r"\b(?:87|regular|unleaded)\b"), "87"),
)


def normalize_product_name(raw: str | None) -> str:
    """Map a raw product description to its canonical code, or return it trimmed when unrecognized."""
    if not raw:
        return ""

    trimmed = raw.strip()
    candidate = trimmed.lower()
    for pattern, code in PRODUCT_NAME_RULES:
        if pattern.search(candidate):
            return code
    return trimmed


def names_match(left: str | None, right: str | None) -> bool:
    normalized = normalize_product_name(left)
    return bool(normalized) and normalized.casefold() == normalize_product_name(right).casefold()
