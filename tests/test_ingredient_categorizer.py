"""Tests for services/ingredient_categorizer.py"""

import pytest

from simmer.services.ingredient_categorizer import AFFILIATE_CATEGORIES, categorize_ingredient


@pytest.mark.parametrize("item,expected", [
    ("yellow onions", "produce"),
    ("cloves garlic", "produce"),
    ("fresh blueberries", "produce"),
    ("whole milk", "dairy"),
    ("large eggs", "dairy"),
    ("unsalted butter", "dairy"),
    ("boneless chicken thighs", "meat"),
    ("ground beef", "meat"),
    ("flour tortillas", "bakery"),
    ("all-purpose flour", "pantry"),
    ("olive oil", "pantry"),
    ("low-sodium chicken broth", "meat"),
    ("saffron threads", "other"),
])
def test_categories(item, expected):
    assert categorize_ingredient(item) == expected


def test_case_insensitive():
    assert categorize_ingredient("Cheddar CHEESE") == "dairy"


def test_first_matching_bucket_wins():
    # "tomato paste" hits produce before pantry
    assert categorize_ingredient("tomato paste") == "produce"


def test_empty_item_has_no_category():
    assert categorize_ingredient(None) is None
    assert categorize_ingredient("") is None


def test_every_result_is_a_known_category():
    for item in ["rice", "bread", "salmon", "kale", "yogurt", "mystery"]:
        assert categorize_ingredient(item) in AFFILIATE_CATEGORIES
