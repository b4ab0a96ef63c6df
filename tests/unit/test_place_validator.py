"""
Unit tests for place validation and the bundled place dataset.
"""

import pytest
import yaml

from atlas.place_validator import (
    DEFAULT_PLACES_FILE,
    DatasetPlaceValidator,
    PlaceDataError,
    StaticPlaceValidator,
    create_place_validator,
    place_key,
)


def write_yaml(tmp_path, data):
    path = tmp_path / 'places.yaml'
    path.write_text(yaml.safe_dump(data), encoding='utf-8')
    return str(path)


class TestPlaceKey:

    def test_first_two_words_lowercased(self):
        assert place_key('  Rio de Janeiro ') == 'rio de'
        assert place_key('NEW   York') == 'new york'
        assert place_key('Peru') == 'peru'
        assert place_key('') == ''


class TestStaticPlaceValidator:

    def test_case_insensitive_match(self):
        validator = StaticPlaceValidator(['Argentina', 'New York'])

        assert validator.is_valid('argentina')
        assert validator.is_valid('  ARGENTINA ')
        assert validator.is_valid('new york')
        assert not validator.is_valid('Atlantis')

    def test_matches_on_first_two_words(self):
        validator = StaticPlaceValidator(['Rio de Janeiro'])

        assert validator.is_valid('Rio de Janeiro')
        assert validator.is_valid('rio de something')
        assert not validator.is_valid('Rio')

    def test_blank_names_are_invalid(self):
        validator = StaticPlaceValidator(['Peru', '  '])

        assert not validator.is_valid('')
        assert not validator.is_valid('   ')
        assert len(validator) == 1


class TestDatasetPlaceValidator:

    def test_loads_all_categories(self, tmp_path):
        path = write_yaml(tmp_path, {
            'countries': ['Argentina', 'Brazil'],
            'states': ['Texas'],
            'cities': ['Paris', 'New Delhi']
        })
        validator = DatasetPlaceValidator(path)
        validator.load_places_from_yaml()

        assert validator.get_place_count() == 5
        assert validator.get_category_counts() == {'countries': 2, 'states': 1, 'cities': 2}
        assert validator.is_valid('texas')
        assert validator.is_valid('New Delhi')
        assert not validator.is_valid('Gotham')

    def test_missing_categories_are_allowed(self, tmp_path):
        path = write_yaml(tmp_path, {'countries': ['Chile'], 'cities': None})
        validator = DatasetPlaceValidator(path)
        validator.load_places_from_yaml()

        assert validator.get_category_counts() == {'countries': 1, 'states': 0, 'cities': 0}

    def test_lazy_load_on_first_check(self, tmp_path):
        path = write_yaml(tmp_path, {'countries': ['Chile']})
        validator = DatasetPlaceValidator(path)

        assert validator.get_place_count() == 0
        assert validator.is_valid('Chile')
        assert validator.get_place_count() == 1

    def test_missing_file(self, tmp_path):
        validator = DatasetPlaceValidator(str(tmp_path / 'missing.yaml'))

        with pytest.raises(FileNotFoundError):
            validator.load_places_from_yaml()

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / 'places.yaml'
        path.write_text('countries: [Chile\n', encoding='utf-8')

        with pytest.raises(yaml.YAMLError):
            DatasetPlaceValidator(str(path)).load_places_from_yaml()

    @pytest.mark.parametrize('data, message', [
        (['Chile'], 'root must be a dictionary'),
        ({'planets': ['Mars']}, 'must contain one of'),
        ({'countries': 'Chile'}, "'countries' must be a list"),
        ({'cities': ['Paris', '']}, 'cities entry 1'),
        ({'states': [42]}, 'states entry 0'),
    ])
    def test_invalid_structure(self, tmp_path, data, message):
        validator = DatasetPlaceValidator(write_yaml(tmp_path, data))

        with pytest.raises(PlaceDataError, match=message):
            validator.load_places_from_yaml()
        assert validator.get_place_count() == 0


class TestBundledDataset:

    def test_default_path_points_at_bundled_file(self):
        assert DatasetPlaceValidator().yaml_file_path == DEFAULT_PLACES_FILE

    def test_bundled_dataset_loads(self):
        validator = create_place_validator()

        counts = validator.get_category_counts()
        assert all(counts[category] > 0 for category in ('countries', 'states', 'cities'))

    @pytest.mark.parametrize('name', ['Argentina', 'Brazil', 'Albania', 'japan', 'NEW YORK'])
    def test_known_places(self, name):
        assert create_place_validator().is_valid(name)

    def test_unknown_place(self):
        assert not create_place_validator().is_valid('Atlantis')
