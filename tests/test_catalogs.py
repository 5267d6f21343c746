"""
Unit tests for the species and plot catalogs.
"""
import json

import pytest

from treelog.domain.catalogs import DEFAULT_PLOTS, DEFAULT_SPECIES, Catalog


class TestCatalogLookup:
    """Tests for lookups with fallbacks."""

    def test_known_codes(self, catalog):
        assert catalog.species_name("A02") == "Burmese Padauk"
        assert catalog.plot_short("P3") == "BKK"
        assert catalog.find_species("B01").group == "B"

    def test_unknown_codes_fall_back(self, catalog):
        assert catalog.species_name("Z99") == "Z99"
        assert catalog.plot_short("P9") == "P9"
        assert catalog.find_plot(None) is None

    def test_defaults_groups_match_prefix(self):
        assert all(s.group == s.code[0] for s in DEFAULT_SPECIES)


class TestCatalogFile:
    """Tests for loading catalogs from JSON."""

    def test_from_file(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps({
            "species": [{"code": "A10", "name": "Neem", "group": "A"}],
            "plots": [{"code": "P7", "name": "North block", "short": "NB"}],
        }))

        catalog = Catalog.from_file(str(path))

        assert catalog.species_name("A10") == "Neem"
        assert catalog.plot_short("P7") == "NB"
        assert catalog.find_species("A02") is None

    def test_missing_section_uses_defaults(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps({"species": [{"code": "A10", "name": "Neem", "group": "A"}]}))

        catalog = Catalog.from_file(str(path))

        assert len(catalog.plots) == len(DEFAULT_PLOTS)

    def test_invalid_entry_raises(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps({"species": [{"code": "A10"}]}))

        with pytest.raises(ValueError, match="Invalid catalog file"):
            Catalog.from_file(str(path))
