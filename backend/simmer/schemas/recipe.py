"""Pydantic schemas for Recipe and its child rows."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class IngredientBase(BaseModel):
    """Base fields for one parsed ingredient line."""

    position: int = Field(ge=1)
    original_text: str
    amount: float | None = None
    amount_max: float | None = None
    unit: str | None = None
    unit_normalized: str | None = None
    item: str | None = None
    preparation: str | None = None
    affiliate_category: str | None = None


class IngredientCreate(IngredientBase):
    pass


class IngredientRead(IngredientBase):
    model_config = ConfigDict(from_attributes=True)

    id: UUID


class InstructionBase(BaseModel):
    step_number: int = Field(ge=1)
    text: str


class InstructionCreate(InstructionBase):
    pass


class InstructionRead(InstructionBase):
    model_config = ConfigDict(from_attributes=True)

    id: UUID


class NutritionBase(BaseModel):
    """Per-serving nutrition facts; every field optional."""

    calories: float | None = None
    fat_grams: float | None = None
    saturated_fat_grams: float | None = None
    carbs_grams: float | None = None
    fiber_grams: float | None = None
    sugar_grams: float | None = None
    protein_grams: float | None = None
    sodium_mg: float | None = None
    cholesterol_mg: float | None = None
    serving_size: str | None = None


class NutritionCreate(NutritionBase):
    pass


class NutritionRead(NutritionBase):
    model_config = ConfigDict(from_attributes=True)

    id: UUID


class RecipeBase(BaseModel):
    """Base fields for a normalized recipe."""

    slug: str
    name: str
    description: str | None = None
    prep_time: int | None = None
    cook_time: int | None = None
    total_time: int | None = None
    servings: int | None = None
    servings_unit: str | None = None
    cuisine: list[str] = []
    category: list[str] = []
    diet_tags: list[str] = []
    source_url: str
    source_domain: str
    source_name: str | None = None


class RecipeCreate(RecipeBase):
    pass


class RecipeRead(RecipeBase):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    last_scraped_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class RecipeWithDetails(RecipeRead):
    """Recipe with ordered ingredients, instructions and nutrition."""

    ingredients: list[IngredientRead] = []
    instructions: list[InstructionRead] = []
    nutrition: NutritionRead | None = None
