"""Pydantic schemas package."""

from simmer.schemas.recipe import (
    IngredientBase,
    IngredientCreate,
    IngredientRead,
    InstructionBase,
    InstructionCreate,
    InstructionRead,
    NutritionBase,
    NutritionCreate,
    NutritionRead,
    RecipeBase,
    RecipeCreate,
    RecipeRead,
    RecipeWithDetails,
)
from simmer.schemas.scrape_queue import (
    BatchResponse,
    DiscoverResponse,
    EnqueueRequest,
    EnqueueResponse,
    QueueStats,
    ScrapeDomainRead,
    ScrapeRequest,
    ScrapeResponse,
)
