"""Upsert recipes and replace their child rows."""

import hashlib
import logging
import uuid

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from simmer.models.base import utcnow
from simmer.models.recipe import Ingredient, Instruction, Nutrition, Recipe
from simmer.schemas.recipe import IngredientCreate, InstructionCreate, NutritionCreate, RecipeCreate

logger = logging.getLogger(__name__)


class RecipeStoreError(Exception):
    """Raised when a recipe could not be persisted."""


class RecipeStore:
    """Persists scraped recipes keyed by source URL.

    The recipe row and all of its children are written in one transaction:
    either the full new state is committed or nothing changes.
    """

    def __init__(self, db: Session):
        self.db = db

    def upsert_recipe(
        self,
        recipe: RecipeCreate,
        ingredients: list[IngredientCreate],
        instructions: list[InstructionCreate],
        nutrition: NutritionCreate | None = None,
    ) -> uuid.UUID:
        """Insert or update ``recipe`` and fully replace its children. Returns the recipe id."""
        try:
            existing = self.db.query(Recipe).filter(Recipe.source_url == recipe.source_url).first()
            data = recipe.model_dump()
            data["slug"] = self._unique_slug(data["slug"], recipe.source_url, existing)

            if existing:
                for key, value in data.items():
                    setattr(existing, key, value)
                existing.last_scraped_at = utcnow()
                row = existing
            else:
                row = Recipe(id=uuid.uuid4(), last_scraped_at=utcnow(), **data)
                self.db.add(row)
            self.db.flush()
            recipe_id = row.id

            # Children are replaced, never merged
            for model in (Ingredient, Instruction, Nutrition):
                self.db.query(model).filter(model.recipe_id == recipe_id).delete(synchronize_session=False)

            self.db.add_all(
                Ingredient(recipe_id=recipe_id, **ingredient.model_dump()) for ingredient in ingredients
            )
            self.db.add_all(
                Instruction(recipe_id=recipe_id, **instruction.model_dump()) for instruction in instructions
            )
            if nutrition is not None:
                self.db.add(Nutrition(recipe_id=recipe_id, **nutrition.model_dump()))

            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to upsert recipe {recipe.source_url}: {e}")
            raise RecipeStoreError(f"Failed to save recipe: {e}") from e

        logger.info(
            f"Saved recipe {recipe_id} ({len(ingredients)} ingredients, {len(instructions)} steps) "
            f"from {recipe.source_url}"
        )
        return recipe_id

    def _unique_slug(self, slug: str, source_url: str, existing: Recipe | None) -> str:
        """Keep the slug unless another source URL already owns it."""
        if existing is not None and existing.slug == slug:
            return slug

        owner = self.db.query(Recipe.source_url).filter(Recipe.slug == slug).first()
        if owner is None or owner.source_url == source_url:
            return slug

        suffix = hashlib.sha256(source_url.encode()).hexdigest()[:8]
        return f"{slug}-{suffix}"
