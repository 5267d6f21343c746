"""
Unit tests for joining placements with growth observations.
"""
import pytest
from datetime import date

from treelog.services.domain.observation_join import (
    STATUS_COLORS,
    ObservationPolicy,
    build_map_markers,
    current_placements,
    map_center,
    observation_history,
    resolve_growth_for,
)
from treelog.services.domain.record_store import place_spatial_records


# ============================================================
# Resolution Tests
# ============================================================

class TestResolveGrowth:
    """Tests for resolving a placement to an observation."""

    def test_no_observation_resolves_to_none(self, make_spatial, sample_growth_records):
        """A placement without observations is not an error."""
        placement = make_spatial(tree_code="P9A01001")

        assert resolve_growth_for(placement, sample_growth_records) is None

    def test_latest_policy_picks_most_recent(self, make_spatial, sample_growth_records):
        placement = make_spatial(tree_code="P1A02014")

        record = resolve_growth_for(placement, sample_growth_records, ObservationPolicy.LATEST)

        assert record.survey_date == date(2024, 7, 1)
        assert record.status == "dead"

    def test_latest_policy_independent_of_load_order(self, make_spatial, make_growth):
        placement = make_spatial()
        records = [
            make_growth(survey_date=date(2024, 9, 1), status="alive"),
            make_growth(survey_date=date(2024, 3, 1), status="dead"),
        ]

        record = resolve_growth_for(placement, records)

        assert record.survey_date == date(2024, 9, 1)

    def test_latest_policy_tie_prefers_later_loaded(self, make_spatial, make_growth):
        """Same-day corrections are appended, so the later entry wins."""
        placement = make_spatial()
        records = [
            make_growth(status="alive", note="first"),
            make_growth(status="dead", note="correction"),
        ]

        record = resolve_growth_for(placement, records)

        assert record.note == "correction"

    def test_first_loaded_policy(self, make_spatial, sample_growth_records):
        placement = make_spatial(tree_code="P1A02014")

        record = resolve_growth_for(
            placement, sample_growth_records, ObservationPolicy.FIRST_LOADED
        )

        assert record.survey_date == date(2024, 1, 15)
        assert record.status == "alive"


# ============================================================
# Placement Deduplication Tests
# ============================================================

class TestCurrentPlacements:
    """Tests for one-placement-per-tree reduction."""

    def test_last_loaded_wins(self, make_spatial):
        records = [
            make_spatial(tree_code="T1", utm_x=1.0),
            make_spatial(tree_code="T2", utm_x=2.0),
            make_spatial(tree_code="T1", utm_x=3.0),
        ]

        result = current_placements(records)

        assert [(r.tree_code, r.utm_x) for r in result] == [("T1", 3.0), ("T2", 2.0)]

    def test_no_duplicates(self, sample_spatial_records):
        assert current_placements(sample_spatial_records) == sample_spatial_records


# ============================================================
# Map Marker Tests
# ============================================================

class TestMapMarkers:
    """Tests for status-colored map markers."""

    @pytest.fixture
    def placed(self, sample_spatial_records):
        return place_spatial_records(sample_spatial_records, 47, "N")

    def test_one_marker_per_placement(self, placed, sample_growth_records):
        markers = build_map_markers(placed, sample_growth_records)

        assert [m.tree_code for m in markers] == ["P1A02014", "P2A01007", "P3A05001"]

    def test_colors_by_status(self, placed, sample_growth_records):
        markers = {m.tree_code: m for m in build_map_markers(placed, sample_growth_records)}

        assert markers["P1A02014"].status == "dead"
        assert markers["P1A02014"].color == STATUS_COLORS["dead"]
        assert markers["P2A01007"].status == "alive"
        assert markers["P2A01007"].color == STATUS_COLORS["alive"]

    def test_unmatched_placement_is_unknown(self, placed, sample_growth_records):
        """Placements without observations render neutral."""
        markers = {m.tree_code: m for m in build_map_markers(placed, sample_growth_records)}

        unknown = markers["P3A05001"]
        assert unknown.status == "unknown"
        assert unknown.color == STATUS_COLORS["unknown"]
        assert unknown.survey_date is None

    def test_observation_without_status_is_unknown(self, make_spatial, make_growth):
        placed = place_spatial_records([make_spatial()], 47, "N")

        markers = build_map_markers(placed, [make_growth(status=None)])

        assert markers[0].status == "unknown"

    def test_skips_unplaced_records(self, make_spatial, sample_growth_records):
        """Records without derived lat/lng are not drawn."""
        assert build_map_markers([make_spatial()], sample_growth_records) == []

    def test_display_fields_fall_back_to_placement(self, make_spatial):
        placed = place_spatial_records(
            [make_spatial(tree_code="P3A05001", species_name="Yang Na", tag_label="1 BKK 01 (1) Yang Na")],
            47, "N",
        )

        marker = build_map_markers(placed, [])[0]

        assert marker.species_name == "Yang Na"
        assert marker.tag_label == "1 BKK 01 (1) Yang Na"


class TestMapCenter:
    """Tests for map centering."""

    def test_default_when_empty(self):
        assert map_center([], (18.49, 98.38)) == (18.49, 98.38)

    def test_mean_of_markers(self, sample_spatial_records, sample_growth_records):
        placed = place_spatial_records(sample_spatial_records, 47, "N")
        markers = build_map_markers(placed, sample_growth_records)

        lat, lng = map_center(markers, (0.0, 0.0))

        assert lat == pytest.approx(sum(m.lat for m in markers) / 3)
        assert lng == pytest.approx(sum(m.lng for m in markers) / 3)


# ============================================================
# History Tests
# ============================================================

class TestObservationHistory:
    """Tests for per-tree observation history."""

    def test_sorted_by_survey_date(self, make_growth):
        records = [
            make_growth(survey_date=date(2024, 9, 1)),
            make_growth(tree_code="OTHER001"),
            make_growth(survey_date=date(2023, 12, 1)),
        ]

        history = observation_history("P1A02014", records)

        assert [r.survey_date for r in history] == [date(2023, 12, 1), date(2024, 9, 1)]

    def test_unknown_tree(self, sample_growth_records):
        assert observation_history("NOPE", sample_growth_records) == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
