"""Models package. Importing it registers every table on Base.metadata."""

from simmer.models.base import Base  # noqa: F401
from simmer.models.recipe import Ingredient, Instruction, Nutrition, Recipe  # noqa: F401
from simmer.models.scrape_domain import ScrapeDomain  # noqa: F401
from simmer.models.scrape_queue import ScrapeQueueItem  # noqa: F401
