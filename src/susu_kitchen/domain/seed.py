"""Seed roster and recipes used when nothing has been persisted yet."""

from susu_kitchen.domain.models import (
    Difficulty,
    Ingredient,
    Profile,
    ProfileRole,
    Recipe,
)

_UNSPLASH = "https://images.unsplash.com"
ADMIN_PROFILE_ID = "susu"


def _avatar(photo_id: str) -> str:
    return f"{_UNSPLASH}/{photo_id}?ixlib=rb-4.0.3&auto=format&fit=crop&w=400&q=80"


def _hero(photo_id: str) -> str:
    return f"{_UNSPLASH}/{photo_id}?ixlib=rb-4.0.3&auto=format&fit=crop&w=1200&q=80"


def seed_profiles() -> list[Profile]:
    """Return the default family roster."""
    return [
        Profile(
            id=ADMIN_PROFILE_ID,
            name="Susu",
            role=ProfileRole.ADMINISTRATOR,
            avatar=_avatar("photo-1544005313-94ddf0286df2"),
        ),
        Profile(id="dad", name="Papa Joe", avatar=_avatar("photo-1506794778202-cad84cf45f1d")),
        Profile(id="kid1", name="Sofia", avatar=_avatar("photo-1494790108377-be9c29b29330")),
        Profile(id="kid2", name="Leo", avatar=_avatar("photo-1507003211169-0a1dd7228f2d")),
    ]


def _ingredients(prefix: str, rows: list[tuple[str, str, float, str]]) -> list[Ingredient]:
    return [
        Ingredient(
            id=f"{prefix}-{index}",
            item=item,
            amount=amount,
            estimated_cost=cost,
            category=category,
        )
        for index, (item, amount, cost, category) in enumerate(rows, start=1)
    ]


def seed_recipes(created_at: int) -> list[Recipe]:
    """Return the starter recipe collection stamped with ``created_at``."""
    return [
        Recipe(
            id="rec-1",
            title="Susu's Sunday Gravy",
            description=(
                "The secret family tomato sauce slowly simmered with pork ribs and "
                "meatballs. A Sunday tradition that brings everyone to the table."
            ),
            ingredients=_ingredients(
                "ing-1",
                [
                    ("Pork Ribs", "1 lb", 8.50, "Meat"),
                    ("San Marzano Tomatoes", "2 cans", 6.00, "Pantry"),
                    ("Garlic", "5 cloves", 0.50, "Produce"),
                    ("Fresh Basil", "1 bunch", 2.50, "Produce"),
                ],
            ),
            instructions=[
                "Sear the pork ribs in a heavy pot until browned on all sides.",
                "Remove meat, add minced garlic and sauté until fragrant "
                "(don't burn it!).",
                "Crush the tomatoes by hand and add them to the pot with the juices.",
                "Return meat to pot, add basil, and simmer on low for at least 4 hours.",
            ],
            tips=(
                "Don't rush the onions! Let them caramelize slowly for the best "
                "sweetness."
            ),
            image_url=_hero("photo-1572449043416-55f4685c9bb7"),
            author_id=ADMIN_PROFILE_ID,
            created_at=created_at,
            tags=["Italian", "Dinner", "Slow Cook"],
            servings=6,
            prep_time="4 hours",
            difficulty=Difficulty.MEDIUM,
            calories=450,
        ),
        Recipe(
            id="rec-2",
            title="Lemon Ricotta Pancakes",
            description=(
                "Fluffy, light, and zesty. These pancakes are perfect for a special "
                "birthday breakfast."
            ),
            ingredients=_ingredients(
                "ing-2",
                [
                    ("Ricotta Cheese", "1 cup", 4.00, "Dairy"),
                    ("Lemons", "2", 1.50, "Produce"),
                    ("Flour", "1.5 cups", 0.50, "Pantry"),
                ],
            ),
            instructions=[
                "Whisk flour, sugar, and baking powder.",
                "In another bowl, mix ricotta, eggs, milk, and lemon zest.",
                "Fold wet into dry ingredients gently. Do not overmix!",
                "Cook on buttered griddle until golden.",
            ],
            tips="Use fresh ricotta for the best texture.",
            image_url=_hero("photo-1506084868230-bb9d95c24759"),
            author_id=ADMIN_PROFILE_ID,
            created_at=created_at,
            tags=["Breakfast", "Sweet", "Easy"],
            servings=4,
            prep_time="20 mins",
            difficulty=Difficulty.EASY,
            calories=320,
        ),
        Recipe(
            id="rec-3",
            title="Grandma's Stuffed Vine Leaves",
            description=(
                "Delicate vine leaves rolled with aromatic rice, pine nuts, and "
                "currants. A labor of love."
            ),
            ingredients=_ingredients(
                "ing-3",
                [
                    ("Grape Leaves", "1 jar", 5.00, "Pantry"),
                    ("Short Grain Rice", "2 cups", 2.00, "Pantry"),
                    ("Dill & Mint", "1 bunch each", 3.00, "Produce"),
                    ("Lemon Juice", "1/2 cup", 1.00, "Produce"),
                ],
            ),
            instructions=[
                "Rinse the grape leaves to remove brine.",
                "Mix rice with herbs, lemon, and olive oil.",
                "Place a spoonful of filling on a leaf, fold sides, and roll tight.",
                "Stack tightly in a pot, cover with water and lemon, and simmer.",
            ],
            tips=(
                "Place a heavy plate on top of the rolls while cooking to keep them "
                "tight."
            ),
            image_url=_hero("photo-1606923829571-0f2636499681"),
            author_id=ADMIN_PROFILE_ID,
            created_at=created_at,
            tags=["Appetizer", "Vegetarian", "Difficult"],
            servings=8,
            prep_time="2 hours",
            difficulty=Difficulty.HARD,
            calories=150,
        ),
        Recipe(
            id="rec-4",
            title="Chicken Maqluba",
            description=(
                'The famous "Upside Down" rice dish with layers of eggplant, '
                "cauliflower, and spiced chicken."
            ),
            ingredients=_ingredients(
                "ing-4",
                [
                    ("Chicken Thighs", "6 pieces", 8.00, "Meat"),
                    ("Eggplant", "1 large", 2.00, "Produce"),
                    ("Cauliflower", "1 head", 3.00, "Produce"),
                    ("Basmati Rice", "3 cups", 3.00, "Pantry"),
                ],
            ),
            instructions=[
                "Fry eggplant and cauliflower slices until golden.",
                "Boil chicken with aromatics (cardamom, cinnamon) to make broth.",
                "Layer veggies, chicken, and soaked rice in a pot.",
                "Add broth and cook. Flip upside down onto a platter to serve!",
            ],
            tips="Let the pot rest for 15 minutes before flipping to hold the shape.",
            image_url=_hero("photo-1512058564366-18510be2db19"),
            author_id=ADMIN_PROFILE_ID,
            created_at=created_at,
            tags=["Dinner", "Showstopper", "Family"],
            servings=6,
            prep_time="1.5 hours",
            difficulty=Difficulty.HARD,
            calories=600,
        ),
        Recipe(
            id="rec-5",
            title="Honey Walnut Baklava",
            description=(
                "Crispy layers of phyllo dough filled with crushed walnuts and soaked "
                "in orange blossom syrup."
            ),
            ingredients=_ingredients(
                "ing-5",
                [
                    ("Phyllo Dough", "1 pack", 4.00, "Frozen"),
                    ("Walnuts", "3 cups", 10.00, "Pantry"),
                    ("Butter", "2 sticks", 3.00, "Dairy"),
                    ("Honey", "1 cup", 6.00, "Pantry"),
                ],
            ),
            instructions=[
                "Layer buttered phyllo sheets in a pan.",
                "Spread nut mixture every few layers.",
                "Cut into diamond shapes BEFORE baking.",
                "Pour cold syrup over hot pastry immediately after baking.",
            ],
            tips="The syrup must be cold and the baklava hot for it to stay crispy!",
            image_url=_hero("photo-1519676867240-f03562e64548"),
            author_id=ADMIN_PROFILE_ID,
            created_at=created_at,
            tags=["Dessert", "Sweet", "Party"],
            servings=12,
            prep_time="1 hour",
            difficulty=Difficulty.MEDIUM,
            calories=400,
        ),
        Recipe(
            id="rec-6",
            title="Spicy Moroccan Fish Stew",
            description=(
                "White fish poached in a spicy tomato and pepper sauce with preserved "
                "lemons."
            ),
            ingredients=_ingredients(
                "ing-6",
                [
                    ("White Fish Fillets", "4 fillets", 12.00, "Meat"),
                    ("Bell Peppers", "3 mixed", 3.00, "Produce"),
                    ("Paprika & Cumin", "2 tbsp", 1.00, "Pantry"),
                    ("Cilantro", "1 bunch", 1.00, "Produce"),
                ],
            ),
            instructions=[
                "Sauté peppers and garlic with spices.",
                "Add tomatoes and simmer to make a thick sauce.",
                "Nestle fish into the sauce and cover.",
                "Cook gently for 10-15 minutes. Garnish with cilantro.",
            ],
            tips="Serve with crusty bread to soak up the sauce.",
            image_url=_hero("photo-1513222858102-4c280147cb23"),
            author_id=ADMIN_PROFILE_ID,
            created_at=created_at,
            tags=["Dinner", "Seafood", "Healthy"],
            servings=4,
            prep_time="40 mins",
            difficulty=Difficulty.MEDIUM,
            calories=350,
        ),
    ]
