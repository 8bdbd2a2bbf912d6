"""
Category structure and the flattened model index built from it.

Conventions:
- Models are ordered category by category, members in listed order.
  This is also the row/column order of the dissimilarity matrix.
- A "position" is the 0-based index of a model in that flattened order.
- One category (by default the one named "-1") is the miscellaneous bucket
  and is never scored.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

from .errors import StructuralError

logger = logging.getLogger(__name__)

MISC_CLASS = "-1"


@dataclass(frozen=True)
class Category:
    """
    One ground-truth class of models.

    Attributes:
        name: Short category name
        full_name: Display name (parent chain joined by "__")
        models: Model identifiers, in matrix order
        num_models: Declared member count; defaults to len(models)
        miscellaneous: True if this is the bucket excluded from scoring
    """
    name: str
    full_name: str
    models: Tuple[str, ...]
    num_models: Optional[int] = None
    miscellaneous: bool = False

    def __post_init__(self):
        object.__setattr__(self, 'models', tuple(str(m) for m in self.models))
        if self.num_models is None:
            object.__setattr__(self, 'num_models', len(self.models))

    @property
    def size(self) -> int:
        return len(self.models)


class ModelIndex:
    """
    Flattened, read-only view of a category list.

    Maps each model position to its owning category and to its external
    numeric identifier.

    Example:
        >>> cats = [Category("cup", "cup", ("1", "2")), Category("-1", "-1", ("3",))]
        >>> index = ModelIndex(cats)
        >>> index.num_models, index.category_of(2), index.is_excluded(1)
        (3, 1, True)
    """

    def __init__(self, categories: Sequence[Category], misc_name: str = MISC_CLASS):
        """
        Args:
            categories: Parsed categories, in matrix order
            misc_name: Category name treated as miscellaneous when no
                category carries the explicit flag

        Raises:
            StructuralError: If a category's declared count does not match
                its listed members, or a model id is not numeric
        """
        self._categories = tuple(categories)

        for cat in self._categories:
            if cat.num_models != len(cat.models):
                raise StructuralError(
                    f"Category '{cat.full_name}' declares {cat.num_models} models "
                    f"but lists {len(cat.models)}"
                )

        sizes = np.array([cat.size for cat in self._categories], dtype=np.int64)
        n = int(sizes.sum())

        class_of = np.repeat(np.arange(len(self._categories), dtype=np.int64), sizes)
        labels: List[str] = [m for cat in self._categories for m in cat.models]
        try:
            model_ids = np.array([int(m) for m in labels], dtype=np.int64)
        except ValueError as e:
            raise StructuralError(f"Model identifiers must be numeric: {e}")

        self._sizes = sizes
        self._offsets = np.cumsum(sizes) - sizes
        self._class_of = class_of
        self._model_ids = model_ids
        self._labels = tuple(labels)
        flagged = any(cat.miscellaneous for cat in self._categories)
        self._excluded = np.array([
            cat.miscellaneous if flagged else cat.name == misc_name
            for cat in self._categories
        ], dtype=bool)
        for arr in (self._sizes, self._offsets, self._class_of,
                    self._model_ids, self._excluded):
            arr.setflags(write=False)

        logger.debug("Indexed %d models in %d categories", n, len(self._categories))

    @property
    def categories(self) -> Tuple[Category, ...]:
        return self._categories

    @property
    def num_models(self) -> int:
        return len(self._class_of)

    @property
    def num_categories(self) -> int:
        return len(self._categories)

    @property
    def class_of(self) -> np.ndarray:
        """(N,) array, position -> owning category index."""
        return self._class_of

    @property
    def model_ids(self) -> np.ndarray:
        """(N,) array, position -> external numeric model id."""
        return self._model_ids

    @property
    def class_sizes(self) -> np.ndarray:
        """(C,) array of member counts per category."""
        return self._sizes

    def category_of(self, position: int) -> int:
        return int(self._class_of[position])

    def class_size(self, category_index: int) -> int:
        return int(self._sizes[category_index])

    def model_label(self, position: int) -> str:
        """Model identifier exactly as listed in the category structure."""
        return self._labels[position]

    def members(self, category_index: int) -> range:
        """Positions of the models belonging to a category."""
        start = int(self._offsets[category_index])
        return range(start, start + int(self._sizes[category_index]))

    def position_in_class(self, position: int) -> int:
        return position - int(self._offsets[self._class_of[position]])

    def is_excluded(self, category_index: int) -> bool:
        """True for the miscellaneous category."""
        return bool(self._excluded[category_index])

    def __len__(self) -> int:
        return self.num_models


def categories_from_dict(data: Dict) -> List[Category]:
    """
    Build categories from an already-parsed structure.

    Args:
        data: {"categories": [{"name", "full_name", "models",
              "num_models"?, "miscellaneous"?}, ...]}

    Returns:
        Non-empty categories in listed order
    """
    categories = []
    for entry in data.get("categories", []):
        models = entry.get("models", [])
        if not models and not entry.get("num_models"):
            continue
        categories.append(Category(
            name=str(entry["name"]),
            full_name=str(entry.get("full_name", entry["name"])),
            models=tuple(models),
            num_models=entry.get("num_models"),
            miscellaneous=bool(entry.get("miscellaneous", False)),
        ))
    return categories


def load_categories(path: Union[str, Path]) -> List[Category]:
    """
    Load a parsed category structure saved as JSON.

    Args:
        path: Path to the JSON document

    Returns:
        List of Category objects

    Raises:
        StructuralError: If the document is not valid JSON, has no
            "categories" list, or an entry has no name
    """
    path = Path(path)
    with open(path, 'r') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise StructuralError(f"Invalid category JSON in {path}: {e}")

    if not isinstance(data, dict) or not isinstance(data.get("categories"), list):
        raise StructuralError(f"No 'categories' list found in {path}")

    try:
        categories = categories_from_dict(data)
    except KeyError as e:
        raise StructuralError(f"Category entry without {e} in {path}")
    logger.info(
        "Read %d non-empty categories, %d model ids from %s",
        len(categories), sum(c.size for c in categories), path
    )
    return categories
