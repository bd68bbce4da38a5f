"""Schema.org Recipe extraction from JSON-LD, plus field normalizers.

All normalizers are forgiving: unparseable input yields ``None`` or ``[]``,
never an exception.
"""

import html
import json
import logging
import math
import re
from typing import Any

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

# A Recipe node as found in the page (https://schema.org/Recipe)
SchemaRecipe = dict[str, Any]

_DURATION_RE = re.compile(
    r"^P(?:(?P<days>\d+(?:\.\d+)?)D)?"
    r"(?:T(?:(?P<hours>\d+(?:\.\d+)?)H)?(?:(?P<minutes>\d+(?:\.\d+)?)M)?(?:(?P<seconds>\d+(?:\.\d+)?)S)?)?$",
    re.IGNORECASE,
)
_SERVINGS_RE = re.compile(r"\d+")
_SERVINGS_UNIT_RE = re.compile(r"\d+\s*([A-Za-z]+)")
_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")
_TAG_RE = re.compile(r"<[^>]+>")
_WHITESPACE_RE = re.compile(r"\s+")


def extract_json_ld(page_html: str) -> list[Any]:
    """Parse every ``application/ld+json`` block in the page, skipping invalid JSON."""
    soup = BeautifulSoup(page_html, "lxml")
    blocks = []

    for script in soup.find_all("script", type="application/ld+json"):
        content = script.string or script.get_text()
        if not content or not content.strip():
            continue
        try:
            blocks.append(json.loads(content))
        except ValueError as e:
            logger.debug(f"Skipping invalid JSON-LD block: {e}")

    return blocks


def is_recipe_type(node_type: Any) -> bool:
    if node_type == "Recipe":
        return True
    return isinstance(node_type, list) and "Recipe" in node_type


def _is_recipe_node(node: Any) -> bool:
    return isinstance(node, dict) and is_recipe_type(node.get("@type"))


def find_recipe_schema(blocks: list[Any]) -> SchemaRecipe | None:
    """Return the first Recipe node across blocks, in document order.

    Per block: the block itself, then its ``@graph`` entries, then (for a
    top-level array) its elements.
    """
    for block in blocks:
        if _is_recipe_node(block):
            return block

        if isinstance(block, dict) and isinstance(block.get("@graph"), list):
            for node in block["@graph"]:
                if _is_recipe_node(node):
                    return node

        if isinstance(block, list):
            for node in block:
                if _is_recipe_node(node):
                    return node

    return None


def extract_recipe(page_html: str) -> SchemaRecipe | None:
    """Main entry point: HTML in, Recipe node (or None) out."""
    return find_recipe_schema(extract_json_ld(page_html))


def parse_duration(duration: Any) -> int | None:
    """Parse an ISO 8601 duration to whole minutes.

    Examples: PT1H30M -> 90, PT45M -> 45, PT2H -> 120, PT90S -> 2
    """
    if not isinstance(duration, str) or not duration.strip():
        return None

    match = _DURATION_RE.match(duration.strip())
    if not match or not any(match.groupdict().values()):
        return None

    parts = {key: float(value or 0) for key, value in match.groupdict().items()}
    total = parts["days"] * 1440 + parts["hours"] * 60 + parts["minutes"] + parts["seconds"] / 60
    # Half-up rounding so 30 seconds counts as a minute
    return int(math.floor(total + 0.5))


def parse_servings(recipe_yield: Any) -> dict[str, Any] | None:
    """Parse servings/yield text into ``{"servings": int, "unit": str}``.

    Examples: "4 servings", "Makes 12 cookies", "4", ["6", "6 bowls"]
    """
    if isinstance(recipe_yield, list):
        recipe_yield = recipe_yield[0] if recipe_yield else None
    if isinstance(recipe_yield, bool) or recipe_yield is None:
        return None
    if isinstance(recipe_yield, (int, float)):
        recipe_yield = str(int(recipe_yield))
    if not isinstance(recipe_yield, str):
        return None

    match = _SERVINGS_RE.search(recipe_yield)
    if not match:
        return None

    # Unit is the first word after any number, so "6-8 cookies" keeps "cookies"
    unit_match = _SERVINGS_UNIT_RE.search(recipe_yield)
    unit = unit_match.group(1).lower() if unit_match else "servings"
    return {"servings": int(match.group(0)), "unit": unit}


def normalize_instructions(instructions: Any) -> list[str]:
    """Flatten HowToStep/HowToSection/string variants to ordered step strings."""
    if not instructions:
        return []

    if isinstance(instructions, str):
        return [line.strip() for line in instructions.splitlines() if line.strip()]

    steps: list[str] = []

    def visit(item: Any) -> None:
        if isinstance(item, str):
            if item.strip():
                steps.append(item.strip())
        elif isinstance(item, list):
            for child in item:
                visit(child)
        elif isinstance(item, dict):
            item_type = item.get("@type")
            if item_type == "HowToSection" or (
                isinstance(item.get("itemListElement"), list) and not item.get("text")
            ):
                visit(item.get("itemListElement") or [])
            elif item.get("text"):
                text = str(item["text"]).strip()
                if text:
                    steps.append(text)

    visit(instructions if isinstance(instructions, list) else [instructions])
    return steps


def normalize_array(value: Any) -> list[str]:
    """Normalize category/cuisine/keywords to a list of distinct, trimmed tags."""
    if not value:
        return []

    if isinstance(value, str):
        raw = value.split(",")
    elif isinstance(value, list):
        raw = [v for v in value if isinstance(v, (str, int, float)) and not isinstance(v, bool)]
    else:
        return []

    tags: list[str] = []
    for entry in raw:
        tag = str(entry).strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def parse_nutrition_value(value: Any) -> float | None:
    """Pull the first number out of a nutrition field ("200 calories" -> 200)."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str):
        return None

    match = _NUMBER_RE.search(value)
    return float(match.group(0)) if match else None


def clean_text(value: Any) -> str | None:
    """Unescape entities, strip tags and collapse whitespace."""
    if not isinstance(value, str):
        return None
    text = _TAG_RE.sub(" ", html.unescape(value))
    text = _WHITESPACE_RE.sub(" ", text).strip()
    return text or None
