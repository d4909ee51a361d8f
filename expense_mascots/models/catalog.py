"""
Catalog Models

A catalog item is one selectable category mascot image. The catalog is
compiled into the program (see expense_mascots.catalog) and is never
mutated at runtime, so the model is frozen.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class CategoryGroup(str, Enum):
    """
    Expense categories that mascots are grouped under.

    DESIGN DECISION: Using explicit groups rather than free text keeps
    the picker sections and the navigation icons consistent.
    """
    FOOD_AND_DRINKS = "Food & Drinks"
    TRANSPORT = "Transport"
    SHOPPING = "Shopping"
    ENTERTAINMENT = "Entertainment"
    HEALTHCARE = "Healthcare"
    SELF_CARE = "Self-Care"
    OTHER = "Other"


class CatalogItem(BaseModel):
    """A single selectable mascot image."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    identifier: str = Field(
        ...,
        min_length=1,
        description="Stable, unique image path"
    )
    name: str = Field(
        ...,
        min_length=1,
        description="Display label"
    )
    group: CategoryGroup = Field(
        ...,
        description="Category this mascot belongs to"
    )
    is_preferred_default: bool = Field(
        default=False,
        description="Part of the default selection when a user has no preference"
    )
