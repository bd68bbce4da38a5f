"""Tests for scraper/schema_parser.py"""

import pytest

from conftest import PANCAKES, recipe_page
from simmer.scraper.schema_parser import (
    clean_text,
    extract_json_ld,
    extract_recipe,
    find_recipe_schema,
    is_recipe_type,
    normalize_array,
    normalize_instructions,
    parse_duration,
    parse_nutrition_value,
    parse_servings,
)


class TestExtractRecipe:
    """Tests for extract_recipe() and the JSON-LD search order"""

    def test_direct_recipe_block(self):
        schema = extract_recipe(recipe_page(PANCAKES))
        assert schema["name"] == "Fluffy Pancakes"

    def test_recipe_inside_graph(self):
        block = {
            "@context": "https://schema.org",
            "@graph": [
                {"@type": "WebSite", "name": "Example"},
                {"@type": "Recipe", "name": "Graph Soup"},
            ],
        }
        assert extract_recipe(recipe_page(block))["name"] == "Graph Soup"

    def test_recipe_in_top_level_array(self):
        block = [{"@type": "BreadcrumbList"}, {"@type": "Recipe", "name": "Array Stew"}]
        assert extract_recipe(recipe_page(block))["name"] == "Array Stew"

    def test_type_array_containing_recipe(self):
        block = {"@type": ["Recipe", "NewsArticle"], "name": "Tagged Pie"}
        assert extract_recipe(recipe_page(block))["name"] == "Tagged Pie"

    def test_invalid_block_is_skipped(self):
        html = recipe_page({"@type": "Recipe", "name": "Survivor"}, extra_blocks=["{not json"])
        assert extract_recipe(html)["name"] == "Survivor"

    def test_first_match_in_document_order(self):
        html = recipe_page(
            {"@type": "Recipe", "name": "Second"},
            extra_blocks=[{"@type": "Recipe", "name": "First"}],
        )
        assert extract_recipe(html)["name"] == "First"

    def test_no_recipe_returns_none(self):
        html = recipe_page({"@type": "Article", "headline": "Ten tips"})
        assert extract_recipe(html) is None

    def test_page_without_json_ld(self):
        assert extract_recipe("<html><body>No data</body></html>") is None

    def test_extract_json_ld_returns_all_valid_blocks(self):
        html = recipe_page({"@type": "Recipe", "name": "A"}, extra_blocks=[{"@type": "WebSite"}, "[oops"])
        assert len(extract_json_ld(html)) == 2

    def test_find_recipe_schema_ignores_non_dict_nodes(self):
        assert find_recipe_schema(["Recipe", 3, None]) is None


class TestIsRecipeType:
    def test_string_and_list(self):
        assert is_recipe_type("Recipe")
        assert is_recipe_type(["Thing", "Recipe"])

    def test_other_types(self):
        assert not is_recipe_type("HowTo")
        assert not is_recipe_type(None)
        assert not is_recipe_type("recipe")


class TestParseDuration:
    """Tests for parse_duration()"""

    @pytest.mark.parametrize("value,expected", [
        ("PT1H30M", 90),
        ("PT45M", 45),
        ("PT2H", 120),
        ("PT90S", 2),
        ("PT20S", 0),
        ("PT1H0M30S", 61),
        ("P1DT2H", 1560),
        ("PT1.5H", 90),
        ("pt15m", 15),
    ])
    def test_durations(self, value, expected):
        assert parse_duration(value) == expected

    @pytest.mark.parametrize("value", [None, "", "PT", "P", "90 minutes", "1:30", 45, ["PT5M"]])
    def test_unparseable_returns_none(self, value):
        assert parse_duration(value) is None


class TestParseServings:
    """Tests for parse_servings()"""

    def test_count_and_unit(self):
        assert parse_servings("4 servings") == {"servings": 4, "unit": "servings"}

    def test_leading_words(self):
        assert parse_servings("Makes 12 cookies") == {"servings": 12, "unit": "cookies"}

    def test_bare_number_defaults_unit(self):
        assert parse_servings("4") == {"servings": 4, "unit": "servings"}

    def test_list_uses_first_element(self):
        assert parse_servings(["6", "6 bowls"]) == {"servings": 6, "unit": "servings"}

    def test_integer_yield(self):
        assert parse_servings(8) == {"servings": 8, "unit": "servings"}

    @pytest.mark.parametrize("value,expected", [
        ("6-8 cookies", {"servings": 6, "unit": "cookies"}),
        ("4-6 servings", {"servings": 4, "unit": "servings"}),
    ])
    def test_range_keeps_unit(self, value, expected):
        assert parse_servings(value) == expected

    def test_unit_is_lowercased(self):
        assert parse_servings("10 Muffins") == {"servings": 10, "unit": "muffins"}

    @pytest.mark.parametrize("value", [None, "", "a few", [], True, {"value": 4}])
    def test_unparseable_returns_none(self, value):
        assert parse_servings(value) is None


class TestNormalizeInstructions:
    """Tests for normalize_instructions()"""

    def test_string_split_by_lines(self):
        assert normalize_instructions("Mix.\n\n  Bake.  \n") == ["Mix.", "Bake."]

    def test_list_of_strings(self):
        assert normalize_instructions(["Mix.", " ", "Bake."]) == ["Mix.", "Bake."]

    def test_how_to_steps(self):
        steps = [{"@type": "HowToStep", "text": "Chop."}, {"@type": "HowToStep", "text": "Fry."}]
        assert normalize_instructions(steps) == ["Chop.", "Fry."]

    def test_sections_flatten_depth_first(self):
        instructions = [
            {
                "@type": "HowToSection",
                "name": "Dough",
                "itemListElement": [
                    {"@type": "HowToStep", "text": "Knead."},
                    {"@type": "HowToStep", "text": "Rest."},
                ],
            },
            {
                "@type": "HowToSection",
                "name": "Filling",
                "itemListElement": [{"@type": "HowToStep", "text": "Stir."}],
            },
            {"@type": "HowToStep", "text": "Assemble."},
        ]
        assert normalize_instructions(instructions) == ["Knead.", "Rest.", "Stir.", "Assemble."]

    def test_single_step_object(self):
        assert normalize_instructions({"@type": "HowToStep", "text": "Serve."}) == ["Serve."]

    def test_steps_without_text_are_dropped(self):
        assert normalize_instructions([{"@type": "HowToStep"}, {"@type": "HowToStep", "text": "Ok."}]) == ["Ok."]

    def test_empty(self):
        assert normalize_instructions(None) == []
        assert normalize_instructions([]) == []


class TestNormalizeArray:
    def test_comma_string(self):
        assert normalize_array("Italian, Dinner ,") == ["Italian", "Dinner"]

    def test_list(self):
        assert normalize_array([" Vegan", "", "Quick "]) == ["Vegan", "Quick"]

    def test_duplicates_removed_casing_kept(self):
        assert normalize_array(["Dessert", "Dessert", "dessert"]) == ["Dessert", "dessert"]

    def test_non_strings_dropped(self):
        assert normalize_array(["Soup", {"name": "x"}, None]) == ["Soup"]

    def test_empty(self):
        assert normalize_array(None) == []
        assert normalize_array("") == []
        assert normalize_array(42) == []


class TestParseNutritionValue:
    @pytest.mark.parametrize("value,expected", [
        ("200 calories", 200.0),
        ("12.5 g", 12.5),
        ("approx. 30mg", 30.0),
        (150, 150.0),
    ])
    def test_numbers(self, value, expected):
        assert parse_nutrition_value(value) == expected

    @pytest.mark.parametrize("value", [None, "", "n/a", True, ["200"]])
    def test_no_number(self, value):
        assert parse_nutrition_value(value) is None


class TestCleanText:
    def test_entities_and_tags(self):
        assert clean_text("Salt &amp; <em>pepper</em>") == "Salt & pepper"

    def test_whitespace_collapsed(self):
        assert clean_text("  Mix\n\n  well \t ") == "Mix well"

    def test_empty_or_non_string(self):
        assert clean_text("   ") is None
        assert clean_text("<br/>") is None
        assert clean_text(None) is None
        assert clean_text(12) is None
