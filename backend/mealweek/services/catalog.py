"""
Ingredient catalog: classify free-text ingredient names into shopping-list categories.
Exact table match first, then the longest table key contained in the name, else "other".
The table is read-only for the process lifetime.
"""

from types import MappingProxyType
from typing import Iterable

from mealweek.schemas.recipe import AggregatedIngredient, CategoryBucket

STAPLES = "staples"
PROTEINS = "proteins"
VEGETABLES = "vegetables"
FRUITS = "fruits"
DAIRY = "dairy"
CONDIMENTS = "condiments"
OTHER = "other"

# Shopping-list order; OTHER is the catch-all and stays last.
CATEGORIES_ORDERED = (STAPLES, PROTEINS, VEGETABLES, FRUITS, DAIRY, CONDIMENTS, OTHER)

CATEGORY_LABELS = MappingProxyType({
    STAPLES: "主食 (Staples)",
    PROTEINS: "肉类和蛋白质 (Meats & Proteins)",
    VEGETABLES: "蔬菜 (Vegetables)",
    FRUITS: "水果 (Fruits)",
    DAIRY: "乳制品和替代品 (Dairy & Alternatives)",
    CONDIMENTS: "调味品和香料 (Condiments & Spices)",
    OTHER: "其他 (Others)",
})

_CATEGORY_TERMS = {
    STAPLES: [
        "米饭", "面条", "面包", "土豆", "玉米", "馒头", "包子", "饺子", "意面",
        "燕麦", "粉条", "米粉", "粥",
        "rice", "noodles", "bread", "potato", "corn", "pasta", "oats", "tortilla",
    ],
    PROTEINS: [
        "鸡胸肉", "鸡肉", "鸡腿肉", "牛肉", "猪肉", "鱼", "虾", "鸡蛋", "豆腐",
        "豆干", "豆皮", "培根", "香肠", "三文鱼", "鳕鱼", "羊肉", "鸭肉",
        "chicken breast", "chicken", "beef", "pork", "fish", "shrimp", "egg",
        "tofu", "bacon", "sausage", "salmon", "cod", "lamb", "duck", "steak",
    ],
    VEGETABLES: [
        "西兰花", "胡萝卜", "洋葱", "西红柿", "番茄", "黄瓜", "生菜", "菠菜",
        "蘑菇", "青椒", "白菜", "大白菜", "小白菜", "青菜", "上海青", "茄子",
        "豆芽", "香菇", "木耳", "海带", "芹菜", "南瓜", "冬瓜", "苦瓜", "莲藕",
        "蒜苔", "韭菜", "金针菇", "油麦菜", "娃娃菜", "萝卜", "白萝卜", "青萝卜",
        "芦笋", "四季豆", "豌豆", "毛豆",
        "broccoli", "carrot", "onion", "tomato", "cucumber", "lettuce", "spinach",
        "mushroom", "bell pepper", "cabbage", "eggplant", "celery", "pumpkin",
        "asparagus", "green beans", "peas",
    ],
    FRUITS: [
        "苹果", "香蕉", "橙子", "草莓", "蓝莓", "葡萄", "西瓜", "芒果", "梨",
        "桃子", "樱桃",
        "apple", "banana", "orange", "strawberry", "blueberry", "grape",
        "watermelon", "mango", "pear", "peach", "cherry", "avocado",
    ],
    DAIRY: [
        "牛奶", "酸奶", "奶酪", "豆浆", "黄油",
        "milk", "yogurt", "cheese", "soy milk", "butter",
    ],
    CONDIMENTS: [
        "大蒜", "蒜", "姜", "橄榄油", "食用油", "酱油", "盐", "糖", "胡椒",
        "黑胡椒", "白胡椒", "香菜", "葱", "小葱", "大葱", "料酒", "醋", "米醋",
        "陈醋", "淀粉", "辣椒", "干辣椒", "辣椒粉", "花椒", "八角", "桂皮",
        "蚝油", "番茄酱", "芝麻油", "香油", "孜然", "五香粉", "酱",
        "garlic", "ginger", "olive oil", "soy sauce", "salt", "sugar", "pepper",
        "black pepper", "vinegar", "ketchup", "sesame oil", "cumin", "chili",
    ],
    OTHER: [
        "花生", "芝麻", "紫菜", "水", "茶叶", "咖啡", "蜂蜜", "坚果", "核桃", "腰果",
        "peanut", "sesame", "water", "tea", "coffee", "honey", "walnut", "cashew",
    ],
}


def _build_table() -> MappingProxyType:
    table: dict[str, str] = {}
    for category in CATEGORIES_ORDERED:
        for term in _CATEGORY_TERMS.get(category, []):
            table.setdefault(normalize_name(term), category)
    return MappingProxyType(table)


def normalize_name(raw_name: str) -> str:
    """Trim, collapse inner whitespace and casefold. CJK text is unchanged apart from trimming."""
    return " ".join((raw_name or "").split()).casefold()


INGREDIENT_CATEGORIES = _build_table()


def classify(raw_name: str) -> str:
    """Return the category key for an ingredient name. Never fails."""
    name = normalize_name(raw_name)
    if not name:
        return OTHER
    exact = INGREDIENT_CATEGORIES.get(name)
    if exact is not None:
        return exact
    best_key = ""
    for key in INGREDIENT_CATEGORIES:
        # Strictly longer only: equal-length ties keep the earlier table entry.
        if len(key) > len(best_key) and key in name:
            best_key = key
    if best_key:
        return INGREDIENT_CATEGORIES[best_key]
    return OTHER


def group_by_category(items: Iterable[AggregatedIngredient]) -> list[CategoryBucket]:
    """Place items into every category bucket in shopping-list order; empty buckets are kept."""
    grouped: dict[str, list[AggregatedIngredient]] = {c: [] for c in CATEGORIES_ORDERED}
    for item in items:
        grouped[classify(item.name)].append(item)
    return [
        CategoryBucket(category=c, label=CATEGORY_LABELS[c], items=grouped[c])
        for c in CATEGORIES_ORDERED
    ]


def list_categories() -> list[dict[str, str]]:
    return [{"category": c, "label": CATEGORY_LABELS[c]} for c in CATEGORIES_ORDERED]
