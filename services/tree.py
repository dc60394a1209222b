"""Two-level tree assembly over a flat list of categories.

Pure functions: no I/O and no errors. The input is expected to belong to a
single owner; relative input order is kept within every group.
"""

from typing import Dict, List
from models.category import Category, CategoryTree


def build_category_tree(categories: List[Category]) -> List[CategoryTree]:
    """Group a flat category list into parents with their subcategories.

    Args:
        categories: All categories of one owner, typically ordered by id.

    Returns:
        One CategoryTree per top-level category, in input order. A parent
        without children gets an empty subcategories list; subcategories
        whose parent is not in the input are left out.
    """
    trees: List[CategoryTree] = []
    by_parent_id: Dict[int, CategoryTree] = {}

    for category in categories:
        if category.parent_category_id is None:
            tree = CategoryTree(category=category)
            trees.append(tree)
            by_parent_id[category.id] = tree

    for category in categories:
        if category.parent_category_id is not None:
            tree = by_parent_id.get(category.parent_category_id)
            if tree is not None:
                tree.subcategories.append(category)

    return trees


def family_ids(categories: List[Category], category_id: int) -> List[int]:
    """IDs forming one spending bucket: the category plus its subcategories.

    Args:
        categories: All categories of one owner.
        category_id: The category whose family to collect.

    Returns:
        The category ID followed by its direct subcategory IDs, or an empty
        list if the category is not in the input.
    """
    if not any(category.id == category_id for category in categories):
        return []

    return [category_id] + [
        category.id
        for category in categories
        if category.parent_category_id == category_id
    ]


def family_index(categories: List[Category]) -> Dict[int, int]:
    """Map every category ID to the ID of its top-level category.

    Subcategories whose parent is missing from the input are not mapped.
    """
    top_level_ids = {c.id for c in categories if c.parent_category_id is None}

    index = {category_id: category_id for category_id in top_level_ids}
    for category in categories:
        if category.parent_category_id in top_level_ids:
            index[category.id] = category.parent_category_id
    return index
