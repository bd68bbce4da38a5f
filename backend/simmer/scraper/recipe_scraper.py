"""Single-URL recipe scraper: fetch, extract, normalize and persist."""

import logging
import re
import uuid
from dataclasses import dataclass
from typing import Any, Callable
from urllib.parse import urlparse

from sqlalchemy.orm import Session

from simmer.models.scrape_domain import ScrapeDomain
from simmer.schemas.recipe import IngredientCreate, InstructionCreate, NutritionCreate, RecipeCreate
from simmer.scraper.fetcher import FetchError, fetch_with_retry
from simmer.scraper.ingredient_parser import parse_ingredient
from simmer.scraper.rate_limiter import RateLimiter, rate_limiter
from simmer.scraper.schema_parser import (
    SchemaRecipe,
    clean_text,
    extract_recipe,
    normalize_array,
    normalize_instructions,
    parse_duration,
    parse_nutrition_value,
    parse_servings,
)
from simmer.services.ingredient_categorizer import categorize_ingredient
from simmer.services.recipe_store import RecipeStore, RecipeStoreError

logger = logging.getLogger(__name__)

NO_RECIPE_ERROR = "No Recipe schema found"
NO_NAME_ERROR = "Recipe has no name"

# Nutrition field -> schema.org NutritionInformation property
NUTRITION_FIELDS = {
    "calories": "calories",
    "fat_grams": "fatContent",
    "saturated_fat_grams": "saturatedFatContent",
    "carbs_grams": "carbohydrateContent",
    "fiber_grams": "fiberContent",
    "sugar_grams": "sugarContent",
    "protein_grams": "proteinContent",
    "sodium_mg": "sodiumContent",
    "cholesterol_mg": "cholesterolContent",
}


@dataclass
class ScrapeResult:
    """Outcome of scraping one URL. ``error_kind`` is fetch, content, persist or unexpected."""

    success: bool
    url: str
    recipe_id: uuid.UUID | None = None
    error: str | None = None
    error_kind: str | None = None

    @classmethod
    def failure(cls, url: str, error: str, kind: str) -> "ScrapeResult":
        return cls(success=False, url=url, error=error, error_kind=kind)


def domain_from_url(url: str) -> str:
    """Hostname without a leading ``www.``."""
    hostname = (urlparse(url).hostname or "").lower()
    return re.sub(r"^www\.", "", hostname)


def generate_slug(name: str, domain: str) -> str:
    """URL-safe slug: lowercased hyphenated name plus a domain suffix."""
    clean_name = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")[:100]
    domain_suffix = domain.replace(".", "-")[:30]
    return f"{clean_name}-{domain_suffix}"


def _truncate(value: str | None, length: int) -> str | None:
    """Clip free text to its column width."""
    return value[:length] if value else value


def extract_source_name(schema: SchemaRecipe) -> str | None:
    publisher = schema.get("publisher")
    if isinstance(publisher, dict) and publisher.get("name"):
        return str(publisher["name"])

    author = schema.get("author")
    if isinstance(author, list):
        author = author[0] if author else None
    if isinstance(author, str):
        return author or None
    if isinstance(author, dict) and author.get("name"):
        return str(author["name"])
    return None


class RecipeScraper:
    """Scrapes schema.org recipes from arbitrary pages.

    Every outcome is a ScrapeResult; no exception escapes ``scrape()``.
    """

    def __init__(
        self,
        db: Session,
        fetch: Callable[[str], str] = fetch_with_retry,
        limiter: RateLimiter = rate_limiter,
    ):
        self.db = db
        self.fetch = fetch
        self.limiter = limiter
        self.store = RecipeStore(db)

    def scrape(self, url: str) -> ScrapeResult:
        """Run the full cycle for one URL: throttle, fetch, extract, normalize, save."""
        try:
            domain = domain_from_url(url)
            if not domain:
                return ScrapeResult.failure(url, f"Invalid URL: {url}", "unexpected")

            self.limiter.throttle(domain, self._domain_delay(domain))

            try:
                html = self.fetch(url)
            except FetchError as e:
                logger.warning(f"[{domain}] Fetch failed for {url}: {e}")
                return ScrapeResult.failure(url, str(e), "fetch")

            schema = extract_recipe(html)
            if not schema:
                return ScrapeResult.failure(url, NO_RECIPE_ERROR, "content")
            if not schema.get("name") or not clean_text(schema.get("name")):
                return ScrapeResult.failure(url, NO_NAME_ERROR, "content")

            recipe, ingredients, instructions, nutrition = self.normalize(schema, url, domain)

            try:
                recipe_id = self.store.upsert_recipe(recipe, ingredients, instructions, nutrition)
            except RecipeStoreError as e:
                return ScrapeResult.failure(url, str(e), "persist")

            logger.info(f"[{domain}] Scraped '{recipe.name}' from {url}")
            return ScrapeResult(success=True, url=url, recipe_id=recipe_id)

        except Exception as e:
            logger.exception(f"Unexpected error scraping {url}")
            return ScrapeResult.failure(url, str(e) or type(e).__name__, "unexpected")

    def normalize(
        self,
        schema: SchemaRecipe,
        url: str,
        domain: str,
    ) -> tuple[RecipeCreate, list[IngredientCreate], list[InstructionCreate], NutritionCreate | None]:
        """Convert a schema.org Recipe node into store-ready records."""
        name = clean_text(schema["name"])
        servings = parse_servings(schema.get("recipeYield")) or {}

        recipe = RecipeCreate(
            slug=generate_slug(name, domain),
            name=name,
            description=clean_text(schema.get("description")),
            prep_time=parse_duration(schema.get("prepTime")),
            cook_time=parse_duration(schema.get("cookTime")),
            total_time=parse_duration(schema.get("totalTime")),
            servings=servings.get("servings"),
            servings_unit=_truncate(servings.get("unit"), 50),
            cuisine=normalize_array(schema.get("recipeCuisine")),
            category=normalize_array(schema.get("recipeCategory")),
            diet_tags=normalize_array(schema.get("keywords")),
            source_url=url,
            source_domain=domain,
            source_name=_truncate(extract_source_name(schema), 255),
        )

        ingredients = []
        for text in self._ingredient_lines(schema):
            parsed = parse_ingredient(text)
            ingredients.append(IngredientCreate(
                position=len(ingredients) + 1,
                original_text=text,
                amount=parsed.amount,
                amount_max=parsed.amount_max,
                unit=parsed.unit,
                unit_normalized=parsed.unit_normalized,
                item=parsed.item,
                preparation=parsed.preparation,
                affiliate_category=categorize_ingredient(parsed.item),
            ))

        instructions = []
        for step in normalize_instructions(schema.get("recipeInstructions")):
            text = clean_text(step)
            if text:
                instructions.append(InstructionCreate(step_number=len(instructions) + 1, text=text))

        return recipe, ingredients, instructions, self._nutrition(schema.get("nutrition"))

    @staticmethod
    def _ingredient_lines(schema: SchemaRecipe) -> list[str]:
        raw = schema.get("recipeIngredient") or schema.get("ingredients") or []
        if isinstance(raw, str):
            raw = [raw]
        lines = []
        for entry in raw:
            text = clean_text(entry) if isinstance(entry, str) else None
            if text:
                lines.append(text)
        return lines

    @staticmethod
    def _nutrition(data: Any) -> NutritionCreate | None:
        if not isinstance(data, dict):
            return None
        values = {field: parse_nutrition_value(data.get(key)) for field, key in NUTRITION_FIELDS.items()}
        serving_size = data.get("servingSize")
        return NutritionCreate(
            **values,
            serving_size=_truncate(clean_text(serving_size), 100) if isinstance(serving_size, str) else None,
        )

    def _domain_delay(self, domain: str) -> float | None:
        config = self.db.query(ScrapeDomain).filter(ScrapeDomain.domain == domain).first()
        return config.rate_limit_seconds if config else None


def scrape_recipe(url: str, db: Session, **kwargs: Any) -> ScrapeResult:
    """Scrape a single recipe URL with the shared fetcher and rate limiter."""
    return RecipeScraper(db, **kwargs).scrape(url)
