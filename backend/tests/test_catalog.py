"""Tests for ingredient classification and category buckets."""

import pytest

from mealweek.schemas.recipe import AggregatedIngredient
from mealweek.services.catalog import (
    CATEGORIES_ORDERED,
    CATEGORY_LABELS,
    INGREDIENT_CATEGORIES,
    OTHER,
    classify,
    group_by_category,
    list_categories,
)


def test_classify_exact_match():
    assert classify("鸡蛋") == "proteins"
    assert classify("西兰花") == "vegetables"
    assert classify("牛奶") == "dairy"
    assert classify("米饭") == "staples"


def test_classify_trims_whitespace():
    assert classify("  西兰花 ") == "vegetables"
    assert classify("\t苹果\n") == "fruits"


def test_classify_unknown_is_other():
    assert classify("巧克力") == OTHER
    assert classify("xyzzy") == OTHER
    assert classify("") == OTHER
    assert classify("   ") == OTHER


def test_classify_substring_fallback():
    assert classify("鸡胸肉沙拉") == "proteins"
    assert classify("新鲜菠菜叶") == "vegetables"


def test_classify_longest_key_wins():
    # "黑胡椒" (condiments) is longer than "牛肉" (proteins) and "胡椒"
    assert classify("黑胡椒牛肉") == "condiments"
    # "番茄酱" (condiments) beats "番茄" (vegetables)
    assert classify("番茄酱汁") == "condiments"


def test_classify_equal_length_tie_uses_table_order():
    # "土豆" (staples) and "牛肉" (proteins) are both two characters; staples comes first
    assert classify("土豆炖牛肉") == "staples"


def test_classify_english_names_case_insensitive():
    assert classify("Chicken Breast") == "proteins"
    assert classify("EGGPLANT") == "vegetables"
    assert classify("grilled  salmon") == "proteins"


def test_every_table_category_is_known():
    assert set(INGREDIENT_CATEGORIES.values()) <= set(CATEGORIES_ORDERED)


def test_table_is_read_only():
    with pytest.raises(TypeError):
        INGREDIENT_CATEGORIES["巧克力"] = "other"


def test_group_by_category_keeps_order_and_empty_buckets():
    items = [
        AggregatedIngredient(name="鸡蛋", total_quantity_grams=150),
        AggregatedIngredient(name="巧克力", total_quantity_grams=20),
        AggregatedIngredient(name="米饭", total_quantity_grams=300),
    ]
    buckets = group_by_category(items)
    assert [b.category for b in buckets] == list(CATEGORIES_ORDERED)
    assert buckets[-1].category == OTHER
    by_category = {b.category: [i.name for i in b.items] for b in buckets}
    assert by_category["staples"] == ["米饭"]
    assert by_category["proteins"] == ["鸡蛋"]
    assert by_category["other"] == ["巧克力"]
    assert by_category["fruits"] == []


def test_group_by_category_empty_input():
    buckets = group_by_category([])
    assert len(buckets) == len(CATEGORIES_ORDERED)
    assert all(b.items == [] for b in buckets)


def test_list_categories_labels():
    categories = list_categories()
    assert categories[0] == {"category": "staples", "label": CATEGORY_LABELS["staples"]}
    assert categories[-1]["category"] == OTHER
