"""Affiliate category classification for parsed ingredient items."""

import re
from typing import Final

# Shopping-list groupings
AFFILIATE_CATEGORIES: Final[list[str]] = [
    "produce",
    "dairy",
    "meat",
    "bakery",
    "pantry",
    "other",
]

# Keywords to category mapping (order matters - first match wins)
AFFILIATE_PATTERNS: Final[list[tuple[str, list[str]]]] = [
    ("produce", [
        r"\blettuces?\b",
        r"\btomato(?:es)?\b",
        r"\bonions?\b",
        r"\bgarlic\b",
        r"\bpeppers?\b",
        r"\bcarrots?\b",
        r"\bcelery\b",
        r"\bpotato(?:es)?\b",
        r"\bbroccoli\b",
        r"\bspinach\b",
        r"\bkale\b",
        r"\bcucumbers?\b",
        r"\bzucchinis?\b",
        r"\bmushrooms?\b",
        r"\bavocados?\b",
        r"\blemons?\b",
        r"\blimes?\b",
        r"\boranges?\b",
        r"\bapples?\b",
        r"\bbananas?\b",
        r"\b\w*berr(?:y|ies)\b",
        r"\bfruits?\b",
        r"\bvegetables?\b",
    ]),

    ("dairy", [
        r"\bmilk\b",
        r"\bcream\b",
        r"\bcheeses?\b",
        r"\bbutter\b",
        r"\byogh?urts?\b",
        r"\bsour cream\b",
        r"\bcottage cheese\b",
        r"\beggs?\b",
    ]),

    ("meat", [
        r"\bchicken\b",
        r"\bbeef\b",
        r"\bpork\b",
        r"\blamb\b",
        r"\bturkey\b",
        r"\bfish\b",
        r"\bsalmon\b",
        r"\btuna\b",
        r"\bshrimps?\b",
        r"\bbacon\b",
        r"\bsausages?\b",
        r"\bground\b",
    ]),

    ("bakery", [
        r"\bbreads?\b",
        r"\brolls?\b",
        r"\bbuns?\b",
        r"\btortillas?\b",
        r"\bpitas?\b",
        r"\bbagels?\b",
    ]),

    ("pantry", [
        r"\bflour\b",
        r"\bsugar\b",
        r"\bsalt\b",
        r"\boils?\b",
        r"\bvinegar\b",
        r"\bsauces?\b",
        r"\bpastes?\b",
        r"\bstock\b",
        r"\bbroth\b",
        r"\brice\b",
        r"\bpastas?\b",
        r"\bnoodles?\b",
        r"\bbeans?\b",
        r"\blentils?\b",
        r"\bspices?\b",
        r"\bherbs?\b",
        r"\bseasonings?\b",
    ]),
]


def categorize_ingredient(item: str | None) -> str | None:
    """
    Classify an ingredient item into an affiliate category.

    Advisory only: the result never changes how a recipe is parsed or stored.

    Returns:
        One of AFFILIATE_CATEGORIES, or None when there is no item
    """
    if not item:
        return None

    text = item.lower()

    for category, patterns in AFFILIATE_PATTERNS:
        for pattern in patterns:
            if re.search(pattern, text):
                return category

    return "other"
