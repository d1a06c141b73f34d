"""Recipe catalog and ingredient matching for the kitchen minigame."""
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator

from cafe_sim.errors import PreconditionViolation, UnknownIngredientError
from cafe_sim.models import Recipe

logger = logging.getLogger(__name__)

CONTENT_DIR = Path(__file__).parent / "content"


def validate(selection: Iterable[str], recipe: Recipe) -> bool:
    """True when the selection is exactly the recipe's required set."""
    return set(selection) == set(recipe.required)


def format_ingredient_name(ingredient_id: str) -> str:
    return " ".join(word.capitalize() for word in ingredient_id.split("-"))


class Selection:
    """Ingredients the player has picked for the current attempt."""

    def __init__(self, ids: Iterable[str] = ()) -> None:
        self._ids: set[str] = set(ids)

    def toggle(self, ingredient_id: str) -> bool:
        """Add or remove an ingredient. Returns True if it is now selected."""
        if ingredient_id in self._ids:
            self._ids.remove(ingredient_id)
            return False
        self._ids.add(ingredient_id)
        return True

    def clear(self) -> None:
        self._ids.clear()

    @property
    def ids(self) -> frozenset:
        return frozenset(self._ids)

    def __contains__(self, ingredient_id: object) -> bool:
        return ingredient_id in self._ids

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._ids))

    def __len__(self) -> int:
        return len(self._ids)


@dataclass(frozen=True)
class RecipeCatalog:
    pantry: tuple[str, ...]
    recipes: dict

    def get(self, key: str) -> Recipe:
        return self.recipes[key]

    def check_ingredient(self, ingredient_id: str) -> None:
        if ingredient_id not in self.pantry:
            raise UnknownIngredientError(ingredient_id)


def build_catalog(data: dict) -> RecipeCatalog:
    """Validate raw catalog data and build the catalog."""
    pantry = tuple(data.get("pantry", []))
    if len(set(pantry)) != len(pantry):
        raise PreconditionViolation("Pantry lists an ingredient more than once")
    recipes = {}
    for entry in data.get("recipes", []):
        key = entry["key"]
        ingredients = entry.get("ingredients", [])
        if not ingredients:
            raise PreconditionViolation(f"Recipe {key!r} has no ingredients")
        if len(set(ingredients)) != len(ingredients):
            raise PreconditionViolation(f"Recipe {key!r} repeats an ingredient")
        missing = sorted(set(ingredients) - set(pantry))
        if missing:
            raise PreconditionViolation(f"Recipe {key!r} needs unstocked ingredients: {', '.join(missing)}")
        if key in recipes:
            raise PreconditionViolation(f"Recipe {key!r} is defined twice")
        recipes[key] = Recipe(key=key, name=entry.get("name", key), required=frozenset(ingredients))
    return RecipeCatalog(pantry=pantry, recipes=recipes)


def load_catalog(path: str | Path | None = None) -> RecipeCatalog:
    path = Path(path) if path else CONTENT_DIR / "recipes.json"
    catalog = build_catalog(json.loads(path.read_text()))
    logger.info("Loaded %d recipe(s) from %s", len(catalog.recipes), path.name)
    return catalog
