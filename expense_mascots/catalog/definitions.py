"""
Category mascot catalog.

This is the source of truth for every selectable mascot image. The order
of CATEGORY_IMAGES is significant: default selections are derived from it.
"""

from typing import Optional

from expense_mascots.models.catalog import CatalogItem, CategoryGroup


EXPENSE_CATEGORIES: tuple[CategoryGroup, ...] = tuple(CategoryGroup)


def _image(
    name: str,
    group: CategoryGroup,
    path: str,
    default: bool = False,
) -> CatalogItem:
    return CatalogItem(
        identifier=path,
        name=name,
        group=group,
        is_preferred_default=default,
    )


CATEGORY_IMAGES: tuple[CatalogItem, ...] = (
    # Food & Drinks
    _image("Beer", CategoryGroup.FOOD_AND_DRINKS, "/categories/food-and-drinks/dragonBeer.png"),
    _image("Bottled Drink", CategoryGroup.FOOD_AND_DRINKS, "/categories/food-and-drinks/dragonBottledDrink.png"),
    _image("Bread", CategoryGroup.FOOD_AND_DRINKS, "/categories/food-and-drinks/dragonBread.png"),
    _image("Breakfast", CategoryGroup.FOOD_AND_DRINKS, "/categories/food-and-drinks/dragonBreakfast.png"),
    _image("Cake", CategoryGroup.FOOD_AND_DRINKS, "/categories/food-and-drinks/dragonCake.png"),
    _image("Cereal", CategoryGroup.FOOD_AND_DRINKS, "/categories/food-and-drinks/dragonCereal.png"),
    _image("Coffee", CategoryGroup.FOOD_AND_DRINKS, "/categories/food-and-drinks/dragonCoffee.png"),
    _image("Dessert", CategoryGroup.FOOD_AND_DRINKS, "/categories/food-and-drinks/dragonDessert.png"),
    _image("Dinner", CategoryGroup.FOOD_AND_DRINKS, "/categories/food-and-drinks/dragonDinner.png"),
    _image("Fruit", CategoryGroup.FOOD_AND_DRINKS, "/categories/food-and-drinks/dragonFruit.png"),
    _image("Ice Cream", CategoryGroup.FOOD_AND_DRINKS, "/categories/food-and-drinks/dragonIceCream.png"),
    _image("Lunch", CategoryGroup.FOOD_AND_DRINKS, "/categories/food-and-drinks/dragonLunch.png"),
    _image("Noodles", CategoryGroup.FOOD_AND_DRINKS, "/categories/food-and-drinks/dragonNoodles.png"),
    _image("Pudding", CategoryGroup.FOOD_AND_DRINKS, "/categories/food-and-drinks/dragonPudding.png"),
    _image("Rice", CategoryGroup.FOOD_AND_DRINKS, "/categories/food-and-drinks/dragonRice.png", default=True),
    _image("Scramble Eggs", CategoryGroup.FOOD_AND_DRINKS, "/categories/food-and-drinks/dragonScrambleEggs.png"),
    _image("Supper", CategoryGroup.FOOD_AND_DRINKS, "/categories/food-and-drinks/dragonSupper.png"),
    _image("Tea", CategoryGroup.FOOD_AND_DRINKS, "/categories/food-and-drinks/dragonTea.png"),

    # Transport
    _image("Bus", CategoryGroup.TRANSPORT, "/categories/transport/dragonBus.png", default=True),
    _image("Taxi", CategoryGroup.TRANSPORT, "/categories/transport/dragonTaxi.png"),
    _image("Train", CategoryGroup.TRANSPORT, "/categories/transport/dragonTrain.png"),

    # Shopping
    _image("Apparels", CategoryGroup.SHOPPING, "/categories/shopping/dragonApparels.png"),
    _image("Electronics", CategoryGroup.SHOPPING, "/categories/shopping/dragonElectronics.png"),
    _image("Game & Media", CategoryGroup.SHOPPING, "/categories/shopping/dragonGame&Media.png"),
    _image("Grocery", CategoryGroup.SHOPPING, "/categories/shopping/dragonGrocery.png"),
    _image("Hobbies", CategoryGroup.SHOPPING, "/categories/shopping/dragonHobbies.png"),
    _image("Home & Furniture", CategoryGroup.SHOPPING, "/categories/shopping/dragonHome&Furniture.png"),
    _image("Learning & Development", CategoryGroup.SHOPPING, "/categories/shopping/dragonLearning&Development.png"),
    _image("Many Items", CategoryGroup.SHOPPING, "/categories/shopping/dragonShopping.png", default=True),
    _image("Skincare", CategoryGroup.SHOPPING, "/categories/shopping/dragonSkincare.png"),

    # Entertainment
    _image("Arcade", CategoryGroup.ENTERTAINMENT, "/categories/entertainment/dragonArcade.png"),
    _image("Badminton", CategoryGroup.ENTERTAINMENT, "/categories/entertainment/dragonBadminton.png"),
    _image("Bowling", CategoryGroup.ENTERTAINMENT, "/categories/entertainment/dragonBowling.png", default=True),
    _image("Boxing", CategoryGroup.ENTERTAINMENT, "/categories/entertainment/dragonBoxing.png"),
    _image("Concert", CategoryGroup.ENTERTAINMENT, "/categories/entertainment/dragonConcert.png"),
    _image("Karaoke", CategoryGroup.ENTERTAINMENT, "/categories/entertainment/dragonKaraoke.png"),
    _image("Yoga", CategoryGroup.ENTERTAINMENT, "/categories/entertainment/dragonYoga.png"),

    # Healthcare
    _image("Clinic", CategoryGroup.HEALTHCARE, "/categories/healthcare/dragonClinic.png", default=True),
    _image("Hospital", CategoryGroup.HEALTHCARE, "/categories/healthcare/dragonHospital.png"),

    # Self-Care
    _image("Haircut", CategoryGroup.SELF_CARE, "/categories/self-care/dragonHaircut.png", default=True),
    _image("Hair Dye", CategoryGroup.SELF_CARE, "/categories/self-care/dragonHairDye.png"),
    _image("Hair Massage", CategoryGroup.SELF_CARE, "/categories/self-care/dragonHairMassage.png"),
    _image("Hair Perm", CategoryGroup.SELF_CARE, "/categories/self-care/dragonHairPerm.png"),
    _image("Hair Treatment", CategoryGroup.SELF_CARE, "/categories/self-care/dragonHairTreatment.png"),

    # Other
    _image("Money Dragon", CategoryGroup.OTHER, "/images/dragonWithMoney5.png", default=True),
)


def get_images_by_group(
    group: CategoryGroup,
    catalog: tuple[CatalogItem, ...] = CATEGORY_IMAGES,
) -> list[CatalogItem]:
    """Get all images for a specific category."""
    return [img for img in catalog if img.group == group]


def get_default_image_for_group(
    group: CategoryGroup,
    catalog: tuple[CatalogItem, ...] = CATEGORY_IMAGES,
) -> Optional[CatalogItem]:
    """
    Get the image flagged as default for a category.

    Falls back to the first image of the category if none is flagged.
    """
    images = get_images_by_group(group, catalog)
    if not images:
        return None
    for img in images:
        if img.is_preferred_default:
            return img
    return images[0]


def get_image_by_identifier(
    identifier: str,
    catalog: tuple[CatalogItem, ...] = CATEGORY_IMAGES,
) -> Optional[CatalogItem]:
    for img in catalog:
        if img.identifier == identifier:
            return img
    return None


def get_image_by_name(
    name: str,
    catalog: tuple[CatalogItem, ...] = CATEGORY_IMAGES,
) -> Optional[CatalogItem]:
    for img in catalog:
        if img.name == name:
            return img
    return None


def get_groups_with_images(
    catalog: tuple[CatalogItem, ...] = CATEGORY_IMAGES,
) -> list[CategoryGroup]:
    """Unique categories that have at least one image, in catalog order."""
    groups: list[CategoryGroup] = []
    for img in catalog:
        if img.group not in groups:
            groups.append(img.group)
    return groups


def group_has_images(
    group: CategoryGroup,
    catalog: tuple[CatalogItem, ...] = CATEGORY_IMAGES,
) -> bool:
    return any(img.group == group for img in catalog)
