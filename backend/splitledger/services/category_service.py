"""
Expense category catalog.

Lookups never fail: unknown or empty ids resolve to the "other" category.
"""
import logging
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

FALLBACK_CATEGORY_ID = "other"


class Category:
    """Category metadata exposed to clients."""
    def __init__(self, id: str, name: str):
        self.id = id
        self.name = name

    def __repr__(self):
        return f"Category(id={self.id!r}, name={self.name!r})"


# Predefined categories, in display order
EXPENSE_CATEGORIES: Dict[str, Category] = {
    c.id: c for c in [
        Category("foodDrink", "Food & Drink"),
        Category("coffee", "Coffee"),
        Category("groceries", "Groceries"),
        Category("shopping", "Shopping"),
        Category("travel", "Travel"),
        Category("transportation", "Transportation"),
        Category("housing", "Housing"),
        Category("entertainment", "Entertainment"),
        Category("tickets", "Tickets"),
        Category("utilities", "Utilities"),
        Category("water", "Water"),
        Category("education", "Education"),
        Category("health", "Health"),
        Category("personal", "Personal"),
        Category("gifts", "Gifts"),
        Category("technology", "Technology"),
        Category("bills", "Bills & Fees"),
        Category("baby", "Baby & Kids"),
        Category("music", "Music"),
        Category("books", "Books"),
        Category("other", "Other"),
        Category("general", "General Expense"),
    ]
}


def get_category_by_id(category_id: Optional[str]) -> Category:
    """Return category metadata, falling back to "other" for unknown ids."""
    category = EXPENSE_CATEGORIES.get(category_id or "")
    if category is None:
        logger.debug(f"Unknown category '{category_id}'. Using '{FALLBACK_CATEGORY_ID}'.")
        return EXPENSE_CATEGORIES[FALLBACK_CATEGORY_ID]
    return category


def normalize_category_id(category_id: Optional[str]) -> str:
    """Category id to store on a new expense."""
    return get_category_by_id(category_id).id


def get_available_categories() -> List[Category]:
    """Get list of available expense categories."""
    return list(EXPENSE_CATEGORIES.values())
