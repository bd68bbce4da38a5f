"""Initial schema: scrape_domains, scrape_queue, recipes and child tables.

Revision ID: 001
Revises:
Create Date: 2026-10-17
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Scrape domains
    op.create_table(
        "scrape_domains",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("domain", sa.String(255), unique=True, nullable=False, index=True),
        sa.Column("is_enabled", sa.Boolean, nullable=False, server_default=sa.text("true")),
        sa.Column("rate_limit_seconds", sa.Float, nullable=False, server_default=sa.text("5")),
        sa.Column("sitemap_url", sa.Text),
        sa.Column("sitemap_last_fetched", sa.DateTime(timezone=True)),
        sa.Column("last_scraped_at", sa.DateTime(timezone=True)),
        sa.Column("successful_scrapes", sa.Integer, nullable=False, server_default=sa.text("0")),
        sa.Column("failed_scrapes", sa.Integer, nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("rate_limit_seconds >= 0", name="ck_domain_rate_limit"),
    )

    # Scrape queue
    op.create_table(
        "scrape_queue",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("url", sa.Text, unique=True, nullable=False),
        sa.Column("domain", sa.String(255), nullable=False, index=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("priority", sa.Integer, nullable=False, server_default=sa.text("0")),
        sa.Column("attempts", sa.Integer, nullable=False, server_default=sa.text("0")),
        sa.Column("max_attempts", sa.Integer, nullable=False, server_default=sa.text("3")),
        sa.Column("last_error", sa.Text),
        sa.Column("scheduled_for", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("completed_at", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("attempts <= max_attempts", name="ck_queue_attempts_cap"),
    )
    op.create_index("idx_queue_due", "scrape_queue", ["status", "scheduled_for"])
    op.create_index("idx_queue_priority", "scrape_queue", ["status", "priority"])

    # Recipes
    op.create_table(
        "recipes",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("slug", sa.String(160), unique=True, nullable=False, index=True),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("prep_time", sa.Integer),
        sa.Column("cook_time", sa.Integer),
        sa.Column("total_time", sa.Integer),
        sa.Column("servings", sa.Integer),
        sa.Column("servings_unit", sa.String(50)),
        sa.Column("cuisine", postgresql.JSONB, nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("category", postgresql.JSONB, nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("diet_tags", postgresql.JSONB, nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("source_url", sa.Text, unique=True, nullable=False),
        sa.Column("source_domain", sa.String(255), nullable=False, index=True),
        sa.Column("source_name", sa.String(255)),
        sa.Column("last_scraped_at", sa.DateTime(timezone=True)),
        sa.Column("is_deleted", sa.Boolean, nullable=False, server_default=sa.text("false"), index=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    # Ingredients
    op.create_table(
        "ingredients",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("recipe_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False),
        sa.Column("position", sa.Integer, nullable=False),
        sa.Column("original_text", sa.Text, nullable=False),
        sa.Column("amount", sa.Float),
        sa.Column("amount_max", sa.Float),
        sa.Column("unit", sa.String(50)),
        sa.Column("unit_normalized", sa.String(20)),
        sa.Column("item", sa.Text),
        sa.Column("preparation", sa.Text),
        sa.Column("affiliate_category", sa.String(20)),
    )
    op.create_index("idx_ingredient_recipe_position", "ingredients", ["recipe_id", "position"])

    # Instructions
    op.create_table(
        "instructions",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("recipe_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False),
        sa.Column("step_number", sa.Integer, nullable=False),
        sa.Column("text", sa.Text, nullable=False),
    )
    op.create_index("idx_instruction_recipe_step", "instructions", ["recipe_id", "step_number"])

    # Nutrition (at most one row per recipe)
    op.create_table(
        "nutrition",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("recipe_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("recipes.id", ondelete="CASCADE"), unique=True, nullable=False),
        sa.Column("calories", sa.Float),
        sa.Column("fat_grams", sa.Float),
        sa.Column("saturated_fat_grams", sa.Float),
        sa.Column("carbs_grams", sa.Float),
        sa.Column("fiber_grams", sa.Float),
        sa.Column("sugar_grams", sa.Float),
        sa.Column("protein_grams", sa.Float),
        sa.Column("sodium_mg", sa.Float),
        sa.Column("cholesterol_mg", sa.Float),
        sa.Column("serving_size", sa.String(100)),
    )


def downgrade() -> None:
    op.drop_table("nutrition")
    op.drop_table("instructions")
    op.drop_table("ingredients")
    op.drop_table("recipes")
    op.drop_index("idx_queue_priority", table_name="scrape_queue")
    op.drop_index("idx_queue_due", table_name="scrape_queue")
    op.drop_table("scrape_queue")
    op.drop_table("scrape_domains")
