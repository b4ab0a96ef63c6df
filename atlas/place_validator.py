"""
Place validation for the Atlas game

Rooms only check game rules; whether a string names a real place is delegated
to a PlaceValidator. The dataset-backed implementation loads countries, states
and cities from a YAML file and matches names by their first two words,
case-insensitively.
"""

import os
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, FrozenSet, Iterable, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_PLACES_FILE = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'data', 'places.yaml')
PLACE_CATEGORIES = ('countries', 'states', 'cities')


class PlaceDataError(Exception):
    """Raised when the places file has an invalid structure."""
    pass


def place_key(name: str) -> str:
    """Matching key for a place name: its first two words, lowercased."""
    return ' '.join(name.strip().lower().split()[:2])


class PlaceValidator(ABC):
    """Capability answering whether a string names a known place."""

    @abstractmethod
    def is_valid(self, name: str) -> bool:
        """Return True if ``name`` names a known place."""


class StaticPlaceValidator(PlaceValidator):
    """Validator backed by a fixed allow-list."""

    def __init__(self, places: Iterable[str]):
        self._keys: FrozenSet[str] = frozenset(place_key(p) for p in places if p.strip())

    def is_valid(self, name: str) -> bool:
        if not name or not name.strip():
            return False
        return place_key(name) in self._keys

    def __len__(self) -> int:
        return len(self._keys)


class DatasetPlaceValidator(PlaceValidator):
    """Validator backed by the countries/states/cities YAML dataset."""

    def __init__(self, yaml_file_path: Optional[str] = None):
        """
        Args:
            yaml_file_path: Path to the places file; defaults to the bundled dataset
        """
        self.yaml_file_path = yaml_file_path or DEFAULT_PLACES_FILE
        self._keys: FrozenSet[str] = frozenset()
        self._counts: Dict[str, int] = {}
        self._loaded = False

    def load_places_from_yaml(self) -> None:
        """
        Load place names from the YAML file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            PlaceDataError: If the structure is invalid
            yaml.YAMLError: If YAML parsing fails
        """
        try:
            with open(self.yaml_file_path, 'r', encoding='utf-8') as file:
                data = yaml.safe_load(file)

            self.validate_yaml_structure(data)
            keys = set()
            for category in PLACE_CATEGORIES:
                names = data.get(category) or []
                self._counts[category] = len(names)
                keys.update(place_key(name) for name in names)
            self._keys = frozenset(keys)
            self._loaded = True
            logger.info(f"Loaded {self.get_place_count()} places from {self.yaml_file_path}")

        except FileNotFoundError:
            logger.error(f"Places file not found: {self.yaml_file_path}")
            raise
        except yaml.YAMLError as e:
            logger.error(f"Places YAML parsing error: {e}")
            raise
        except PlaceDataError as e:
            logger.error(f"Places validation error: {e}")
            raise

    def validate_yaml_structure(self, data: Any) -> None:
        """
        Validate the structure of the loaded places data.

        Raises:
            PlaceDataError: If structure is invalid
        """
        if not isinstance(data, dict):
            raise PlaceDataError("Places YAML root must be a dictionary")

        present = [c for c in PLACE_CATEGORIES if c in data]
        if not present:
            raise PlaceDataError(f"Places YAML must contain one of {', '.join(PLACE_CATEGORIES)}")

        for category in present:
            names = data[category]
            if names is None:
                continue
            if not isinstance(names, list):
                raise PlaceDataError(f"'{category}' must be a list")
            for i, name in enumerate(names):
                if not isinstance(name, str) or not name.strip():
                    raise PlaceDataError(f"{category} entry {i} must be a non-empty string")

    def get_place_count(self) -> int:
        """Number of entries read from the file, across all categories."""
        return sum(self._counts.values())

    def get_category_counts(self) -> Dict[str, int]:
        return dict(self._counts)

    def is_valid(self, name: str) -> bool:
        if not self._loaded:
            self.load_places_from_yaml()
        if not name or not name.strip():
            return False
        return place_key(name) in self._keys


def create_place_validator(places_file: Optional[str] = None) -> DatasetPlaceValidator:
    """Build and load the dataset validator."""
    validator = DatasetPlaceValidator(places_file)
    validator.load_places_from_yaml()
    return validator
