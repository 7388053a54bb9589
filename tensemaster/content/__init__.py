"""
Static content: built-in courses, achievements and shop items.
"""

from tensemaster.content.achievements import ACHIEVEMENTS
from tensemaster.content.catalog import (
    ALL_TENSE_NAMES,
    BUILTIN_COURSE_IDS,
    BUILTIN_COURSES,
    CourseCatalog,
)
from tensemaster.content.shop_items import SHOP_ITEMS, get_item

__all__ = [
    "ACHIEVEMENTS",
    "ALL_TENSE_NAMES",
    "BUILTIN_COURSES",
    "BUILTIN_COURSE_IDS",
    "CourseCatalog",
    "SHOP_ITEMS",
    "get_item",
]
