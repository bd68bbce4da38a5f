"""Recipe model and its ingredient, instruction and nutrition rows."""

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship

from simmer.models.base import Base, JSONType, TimestampMixin, UUIDMixin


class Recipe(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "recipes"

    slug = Column(String(160), unique=True, nullable=False, index=True)
    name = Column(Text, nullable=False)
    description = Column(Text)

    # Minutes
    prep_time = Column(Integer)
    cook_time = Column(Integer)
    total_time = Column(Integer)

    servings = Column(Integer)
    servings_unit = Column(String(50))

    # Tag arrays
    cuisine = Column(JSONType, default=list, nullable=False)
    category = Column(JSONType, default=list, nullable=False)
    diet_tags = Column(JSONType, default=list, nullable=False)

    # Source (upsert key)
    source_url = Column(Text, unique=True, nullable=False)
    source_domain = Column(String(255), nullable=False, index=True)
    source_name = Column(String(255))

    last_scraped_at = Column(DateTime(timezone=True))
    is_deleted = Column(Boolean, default=False, nullable=False, index=True)

    ingredients = relationship(
        "Ingredient",
        back_populates="recipe",
        order_by="Ingredient.position",
        passive_deletes=True,
    )
    instructions = relationship(
        "Instruction",
        back_populates="recipe",
        order_by="Instruction.step_number",
        passive_deletes=True,
    )
    nutrition = relationship(
        "Nutrition",
        back_populates="recipe",
        uselist=False,
        passive_deletes=True,
    )


class Ingredient(UUIDMixin, Base):
    __tablename__ = "ingredients"

    recipe_id = Column(Uuid(as_uuid=True), ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False)  # 1-based
    original_text = Column(Text, nullable=False)
    amount = Column(Float)
    amount_max = Column(Float)  # only set for stated ranges
    unit = Column(String(50))
    unit_normalized = Column(String(20))
    item = Column(Text)
    preparation = Column(Text)
    affiliate_category = Column(String(20))  # produce, dairy, meat, bakery, pantry, other

    recipe = relationship("Recipe", back_populates="ingredients")

    __table_args__ = (
        Index("idx_ingredient_recipe_position", "recipe_id", "position"),
    )


class Instruction(UUIDMixin, Base):
    __tablename__ = "instructions"

    recipe_id = Column(Uuid(as_uuid=True), ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False)
    step_number = Column(Integer, nullable=False)  # 1-based
    text = Column(Text, nullable=False)

    recipe = relationship("Recipe", back_populates="instructions")

    __table_args__ = (
        Index("idx_instruction_recipe_step", "recipe_id", "step_number"),
    )


class Nutrition(UUIDMixin, Base):
    __tablename__ = "nutrition"

    recipe_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("recipes.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )

    # Per serving
    calories = Column(Float)
    fat_grams = Column(Float)
    saturated_fat_grams = Column(Float)
    carbs_grams = Column(Float)
    fiber_grams = Column(Float)
    sugar_grams = Column(Float)
    protein_grams = Column(Float)
    sodium_mg = Column(Float)
    cholesterol_mg = Column(Float)
    serving_size = Column(String(100))

    recipe = relationship("Recipe", back_populates="nutrition")
