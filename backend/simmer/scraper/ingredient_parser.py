"""Ingredient line parser.

Splits free text into amount (optionally a range), unit, item and
preparation. Examples:
    "2 cups flour"              -> amount 2, unit "cups" (cup), item "flour"
    "1/2 teaspoon salt"         -> amount 0.5, unit "teaspoon" (tsp), item "salt"
    "3-4 cloves garlic, minced" -> amount 3, amount_max 4, item "cloves garlic", preparation "minced"

The parser is heuristic and never raises; anything it cannot place ends up
in ``item``.
"""

import re
from dataclasses import asdict, dataclass
from typing import Any, Final

# Spelling -> canonical abbreviation
UNIT_MAP: Final[dict[str, str]] = {
    # Volume - tablespoons
    "tablespoon": "tbsp",
    "tablespoons": "tbsp",
    "tbsp": "tbsp",
    "tbsps": "tbsp",
    "tbs": "tbsp",
    "tb": "tbsp",
    # Volume - teaspoons
    "teaspoon": "tsp",
    "teaspoons": "tsp",
    "tsp": "tsp",
    "tsps": "tsp",
    "ts": "tsp",
    # Volume - cups
    "cup": "cup",
    "cups": "cup",
    "c": "cup",
    # Volume - fluid ounces
    "fluid ounce": "fl oz",
    "fluid ounces": "fl oz",
    "fl oz": "fl oz",
    "floz": "fl oz",
    # Volume - pints, quarts, gallons
    "pint": "pint",
    "pints": "pint",
    "pt": "pint",
    "quart": "quart",
    "quarts": "quart",
    "qt": "quart",
    "gallon": "gallon",
    "gallons": "gallon",
    "gal": "gallon",
    # Weight - ounces, pounds
    "ounce": "oz",
    "ounces": "oz",
    "oz": "oz",
    "pound": "lb",
    "pounds": "lb",
    "lb": "lb",
    "lbs": "lb",
    # Metric mass
    "gram": "g",
    "grams": "g",
    "g": "g",
    "gr": "g",
    "kilogram": "kg",
    "kilograms": "kg",
    "kg": "kg",
    # Metric volume
    "milliliter": "ml",
    "milliliters": "ml",
    "millilitre": "ml",
    "millilitres": "ml",
    "ml": "ml",
    "liter": "L",
    "liters": "L",
    "litre": "L",
    "litres": "L",
    "l": "L",
    # Other common units
    "pinch": "pinch",
    "pinches": "pinch",
    "dash": "dash",
    "dashes": "dash",
    "handful": "handful",
    "handfuls": "handful",
    "bunch": "bunch",
    "bunches": "bunch",
    "sprig": "sprig",
    "sprigs": "sprig",
    "clove": "clove",
    "cloves": "clove",
    "slice": "slice",
    "slices": "slice",
    "piece": "piece",
    "pieces": "piece",
    "can": "can",
    "cans": "can",
    "package": "package",
    "packages": "package",
    "pkg": "package",
    "stick": "stick",
    "sticks": "stick",
    "head": "head",
    "heads": "head",
    "stalk": "stalk",
    "stalks": "stalk",
}

# Parts of a plant that read as the item itself ("cloves garlic") unless
# followed by "of" ("2 cloves of garlic")
PORTION_UNITS: Final[frozenset[str]] = frozenset({"clove", "sprig", "stalk", "head", "bunch"})

FRACTION_MAP: Final[dict[str, float]] = {
    "½": 0.5,
    "⅓": 0.333,
    "⅔": 0.667,
    "¼": 0.25,
    "¾": 0.75,
    "⅛": 0.125,
    "⅜": 0.375,
    "⅝": 0.625,
    "⅞": 0.875,
    "⅕": 0.2,
    "⅖": 0.4,
    "⅗": 0.6,
    "⅘": 0.8,
    "⅙": 0.167,
    "⅚": 0.833,
}

_GLYPHS = "".join(FRACTION_MAP)

# One quantity: "1 1/2", "1/2", "1½", "1 ½", "1.5", "½"
_NUMBER = (
    r"(?:\d+\s+[1-9]\d*/[1-9]\d*"
    r"|\d+/[1-9]\d*"
    rf"|\d+(?:\.\d+)?\s*[{_GLYPHS}]"
    r"|\d+(?:\.\d+)?"
    rf"|[{_GLYPHS}])"
)

AMOUNT_PATTERN: Final = re.compile(
    rf"^(?P<amount>{_NUMBER})(?:\s*(?:[-–—]|to\b)\s*(?P<amount_max>{_NUMBER}))?\s*",
    re.IGNORECASE,
)

UNIT_PATTERN: Final = re.compile(
    r"^(?P<unit>"
    + "|".join(re.escape(u) for u in sorted(UNIT_MAP, key=len, reverse=True))
    + r")\.?\s+(?P<of>of\s+)?",
    re.IGNORECASE,
)

PREPARATION_PATTERN: Final = re.compile(r",\s*(.*)$", re.DOTALL)

# Size notes such as "(14 oz)", "(400 g)", "(1.5 lbs.)"
SIZE_NOTE_PATTERN: Final = re.compile(
    r"\(\s*[\d\s.,/" + _GLYPHS + r"-]+\s*(?:oz|ounces?|g|grams?|ml|lbs?|pounds?|kg|l)?\.?\s*\)",
    re.IGNORECASE,
)


@dataclass
class ParsedIngredient:
    amount: float | None = None
    amount_max: float | None = None
    unit: str | None = None
    unit_normalized: str | None = None
    item: str | None = None
    preparation: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def parse_number(text: str) -> float | None:
    """Evaluate one quantity token: "2", "1.5", "1/2", "1 1/2", "½", "1½"."""
    text = text.strip()
    if not text:
        return None

    for glyph, value in FRACTION_MAP.items():
        if glyph in text:
            whole = text.split(glyph, 1)[0].strip()
            try:
                return (float(whole) if whole else 0.0) + value
            except ValueError:
                return value

    total = 0.0
    for part in text.split():
        if "/" in part:
            numerator, _, denominator = part.partition("/")
            try:
                total += float(numerator) / float(denominator)
            except (ValueError, ZeroDivisionError):
                return None
        else:
            try:
                total += float(part)
            except ValueError:
                return None
    return total


def normalize_unit(unit: str) -> str:
    lower = unit.lower().strip().rstrip(".")
    return UNIT_MAP.get(lower, lower)


def parse_ingredient(text: str) -> ParsedIngredient:
    """Parse an ingredient line into amount, unit, item and preparation."""
    result = ParsedIngredient()
    original = (text or "").strip()
    if not original:
        return result

    remaining = original

    # 1. Preparation: everything after the first comma
    prep_match = PREPARATION_PATTERN.search(remaining)
    if prep_match:
        result.preparation = prep_match.group(1).strip() or None
        remaining = remaining[:prep_match.start()].strip()

    # 2. Amount (single value or range)
    amount_match = AMOUNT_PATTERN.match(remaining)
    if amount_match:
        result.amount = parse_number(amount_match.group("amount"))
        if amount_match.group("amount_max"):
            result.amount_max = parse_number(amount_match.group("amount_max"))
        remaining = remaining[amount_match.end():]

        # "1 (14 oz) can tomatoes": drop the size note so the unit is next
        size_match = SIZE_NOTE_PATTERN.match(remaining)
        if size_match:
            remaining = remaining[size_match.end():].lstrip()

    # 3. Unit
    unit_match = UNIT_PATTERN.match(remaining)
    if unit_match:
        spelling = unit_match.group("unit")
        canonical = normalize_unit(spelling)
        if canonical not in PORTION_UNITS or unit_match.group("of"):
            result.unit = spelling
            result.unit_normalized = canonical
            remaining = remaining[unit_match.end():]

    # 4. Item: whatever is left, minus size notes
    item = SIZE_NOTE_PATTERN.sub("", remaining)
    item = re.sub(r"\s+", " ", item).strip()
    result.item = item or None

    if result.item is None and result.amount is None and result.unit is None:
        result.item = original if result.preparation is None else remaining.strip() or original

    return result


def parse_ingredients(texts: list[str]) -> list[ParsedIngredient]:
    return [parse_ingredient(text) for text in texts]
