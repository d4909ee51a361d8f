"""Compiled-in mascot catalog and lookup helpers."""

from expense_mascots.catalog.definitions import (
    CATEGORY_IMAGES,
    EXPENSE_CATEGORIES,
    get_default_image_for_group,
    get_groups_with_images,
    get_image_by_identifier,
    get_image_by_name,
    get_images_by_group,
    group_has_images,
)

__all__ = [
    "CATEGORY_IMAGES",
    "EXPENSE_CATEGORIES",
    "get_default_image_for_group",
    "get_groups_with_images",
    "get_image_by_identifier",
    "get_image_by_name",
    "get_images_by_group",
    "group_has_images",
]
