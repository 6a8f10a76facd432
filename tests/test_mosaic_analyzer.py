"""
Unit tests for mosaic suitability analysis.

Tests cover:
- Density classification
- Suitability scoring
- Recommendation generation
- End-to-end analysis scenarios
- Statelessness and configuration
"""
import pytest
from concurrent.futures import ThreadPoolExecutor

from mosaic_api.domain.models import GeoPoint, GroupStats
from mosaic_api.services.domain.mosaic_analyzer import (
    NO_IMAGES_ERROR,
    AnalysisConfig,
    MosaicAnalyzer,
    analyze,
    get_heatmap_data,
)
from mosaic_api.services.domain.suitability import (
    EXCELLENT_POTENTIAL,
    FAIR_POTENTIAL,
    GOOD_POTENTIAL,
    LIMITED_POTENTIAL,
    LOW_DENSITY_CAVEAT,
    MORE_IMAGES_NEEDED,
    SPARSE_OVERLAP_CAVEAT,
    UPLOAD_PROMPT,
    DensityThresholds,
    calculate_group_stats,
    classify_density,
    density_score,
    generate_recommendation,
    score_suitability,
)
from mosaic_api.utils.spatial_helpers import find_overlap_groups


def stats(total_groups=1, single_image_groups=0, largest_group=10) -> GroupStats:
    return GroupStats(
        total_groups=total_groups,
        largest_group=largest_group,
        average_group_size=1.0,
        single_image_groups=single_image_groups,
    )


# ============================================================
# Density Tests
# ============================================================

class TestDensityClassification:
    """Tests for density calculation and tiers."""

    @pytest.mark.parametrize("images, area, category", [
        (5, 1.0, "low"),
        (10, 1.0, "medium"),
        (29, 1.0, "medium"),
        (30, 1.0, "high"),
        (99, 1.0, "high"),
        (100, 1.0, "very high"),
    ])
    def test_tiers(self, images, area, category):
        info = classify_density(images, area, DensityThresholds())

        assert info.category == category
        assert info.images_per_km2 == pytest.approx(images / area)

    def test_degenerate_area_gives_zero_density(self):
        info = classify_density(12, 0.0, DensityThresholds())

        assert info.images_per_km2 == 0.0
        assert info.category == "low"

    def test_custom_thresholds(self):
        info = classify_density(5, 1.0, DensityThresholds(low=1, medium=2, high=4))

        assert info.category == "very high"

    @pytest.mark.parametrize("density, score", [
        (0.0, 0),
        (0.001, 5),
        (10.0, 15),
        (30.0, 25),
        (50.0, 25),
        (100.0, 30),
    ])
    def test_density_score_tiers(self, density, score):
        assert density_score(density, DensityThresholds()) == score

    def test_thresholds_must_ascend(self):
        with pytest.raises(ValueError):
            DensityThresholds(low=30, medium=10, high=100)

    def test_thresholds_must_not_be_negative(self):
        with pytest.raises(ValueError):
            DensityThresholds(low=-1, medium=10, high=100)


# ============================================================
# Scoring Tests
# ============================================================

class TestSuitabilityScoring:
    """Tests for the four score components."""

    def test_clustered_scenario_components(self, clustered_points):
        groups = find_overlap_groups(clustered_points, 0.0002)

        components = score_suitability(5, groups, 1e-6, DensityThresholds())

        assert components.image_count == 1       # 5/100 * 20
        assert components.overlap == 24          # 3/5 * 40
        assert components.density == 5
        assert components.distribution == 4      # 10 * (1 - 0.6)
        assert components.total == 34

    def test_image_count_capped_at_100(self, point_factory):
        points = point_factory([(i * 0.5, 0.0) for i in range(150)])
        groups = find_overlap_groups(points, 0.0002)

        components = score_suitability(150, groups, 0.0, DensityThresholds())

        assert components.image_count == 20

    def test_distribution_capped_for_single_group(self, dense_cluster_points):
        groups = find_overlap_groups(dense_cluster_points, 0.0002)

        components = score_suitability(6, groups, 0.0, DensityThresholds())

        assert components.overlap == 40
        assert components.distribution == 1      # 10 * (1 - 0.9)
        assert components.total == 42            # 1.2 + 40 + 0 + 1

    def test_no_groups_scores_zero_distribution(self):
        components = score_suitability(3, [], 0.0, DensityThresholds())

        assert components.distribution == 0

    def test_total_rounds_half_up(self, point_factory):
        points = point_factory([(i * 1.0, 0.0) for i in range(25)])
        groups = find_overlap_groups(points, 0.0002)

        components = score_suitability(25, groups, 0.0, DensityThresholds())

        # 5 + 0 + 0 + 9.6 = 14.6
        assert components.total == 15

    def test_score_bounds(self, random_points):
        groups = find_overlap_groups(random_points, 0.0002)

        for density in (0.0, 1.0, 20.0, 50.0, 500.0):
            total = score_suitability(len(random_points), groups, density, DensityThresholds()).total
            assert isinstance(total, int)
            assert 0 <= total <= 100


# ============================================================
# Recommendation Tests
# ============================================================

class TestRecommendation:
    """Tests for recommendation precedence."""

    def test_no_images(self):
        assert generate_recommendation(0, 0, "low", stats(), None) == UPLOAD_PROMPT

    def test_few_images_is_terminal(self, dense_cluster_points):
        groups = find_overlap_groups(dense_cluster_points, 0.0002)

        text = generate_recommendation(3, 95, "low", stats(single_image_groups=1), groups[0])

        assert text == MORE_IMAGES_NEEDED

    @pytest.mark.parametrize("score, base", [
        (80, EXCELLENT_POTENTIAL),
        (79, GOOD_POTENTIAL),
        (60, GOOD_POTENTIAL),
        (40, FAIR_POTENTIAL),
        (39, LIMITED_POTENTIAL),
        (0, LIMITED_POTENTIAL),
    ])
    def test_base_sentence_bands(self, score, base):
        assert generate_recommendation(10, score, "high", stats(), None) == base

    def test_low_density_caveat(self):
        text = generate_recommendation(10, 50, "low", stats(), None)

        assert text == FAIR_POTENTIAL + LOW_DENSITY_CAVEAT

    def test_sparse_overlap_caveat(self):
        text = generate_recommendation(10, 50, "medium", stats(total_groups=10, single_image_groups=8), None)

        assert text == FAIR_POTENTIAL + SPARSE_OVERLAP_CAVEAT

    def test_sparse_overlap_needs_more_than_seventy_percent(self):
        text = generate_recommendation(10, 50, "medium", stats(total_groups=10, single_image_groups=7), None)

        assert text == FAIR_POTENTIAL

    def test_best_area_pointer(self, dense_cluster_points):
        groups = find_overlap_groups(dense_cluster_points, 0.0002)

        text = generate_recommendation(6, 65, "high", calculate_group_stats(groups), groups[0])

        assert text == (
            GOOD_POTENTIAL
            + " Your best mosaic area is centered around 10.000250, 20.000000"
            " with 6 overlapping images."
        )

    def test_no_pointer_for_small_best_group(self, clustered_points):
        groups = find_overlap_groups(clustered_points, 0.0002)

        text = generate_recommendation(5, 65, "high", calculate_group_stats(groups), groups[0])

        assert "best mosaic area" not in text


# ============================================================
# End-to-End Analysis Tests
# ============================================================

class TestAnalysis:
    """End-to-end analysis scenarios."""

    def test_clustered_scenario(self, clustered_points):
        result = analyze(clustered_points)

        assert result.total_images == 5
        assert len(result.overlap_groups) == 3
        assert result.overlap_groups[0].count == 3
        assert {p.name for p in result.overlap_groups[0].members} == {"A", "B", "C"}
        assert sum(g.count for g in result.overlap_groups) == result.total_images
        assert result.suitability == 34
        assert result.recommendation == LIMITED_POTENTIAL + LOW_DENSITY_CAVEAT
        assert result.error is None

    def test_empty_input(self):
        result = analyze([])

        assert result.error == NO_IMAGES_ERROR
        assert result.suitability == 0
        assert result.recommendation == UPLOAD_PROMPT
        assert result.overlap_groups == []
        assert result.coverage_area == 0.0

    def test_one_km_density_scenario(self, one_km_grid_points):
        result = analyze(one_km_grid_points)
        detailed = result.detailed_analysis

        assert result.coverage_area == pytest.approx(1.0, rel=1e-6)
        assert result.average_density == pytest.approx(50.0, rel=1e-6)
        assert detailed.density.category == "high"
        assert detailed.score_components.density == 25
        assert result.suitability == 45          # 10 + 0 + 25 + 9.8
        assert result.recommendation == FAIR_POTENTIAL + SPARSE_OVERLAP_CAVEAT

    def test_few_images_recommendation(self, clustered_points):
        result = analyze(clustered_points[:3])

        assert result.recommendation == MORE_IMAGES_NEEDED

    def test_single_point(self, point_factory):
        result = analyze(point_factory([(45.0, 7.0)]))

        assert result.coverage_area == 0.0
        assert result.average_density == 0.0
        assert result.detailed_analysis.bounding_box.area_km2 == 0.0
        assert len(result.overlap_groups) == 1

    def test_collocated_images_have_zero_density(self, point_factory):
        result = analyze(point_factory([(1.0, 1.0)] * 6))

        assert result.coverage_area == 0.0
        assert result.average_density == 0.0
        assert result.detailed_analysis.density.category == "low"
        assert result.overlap_groups[0].count == 6

    def test_group_stats(self, clustered_points):
        group_stats = analyze(clustered_points).detailed_analysis.group_stats

        assert group_stats.total_groups == 3
        assert group_stats.largest_group == 3
        assert group_stats.average_group_size == pytest.approx(5 / 3)
        assert group_stats.single_image_groups == 2

    def test_idempotent(self, random_points):
        first = analyze(random_points)
        second = analyze(random_points)

        assert first.model_dump() == second.model_dump()

    def test_partition_on_random_points(self, random_points):
        result = analyze(random_points)

        names = [p.name for g in result.overlap_groups for p in g.members]
        assert sorted(names) == sorted(p.name for p in random_points)
        counts = [g.count for g in result.overlap_groups]
        assert counts == sorted(counts, reverse=True)
        assert 0 <= result.suitability <= 100

    def test_accepts_any_iterable(self, clustered_points):
        result = analyze(iter(clustered_points))

        assert result.total_images == 5

    def test_heatmap_data(self, clustered_points):
        heatmap = get_heatmap_data(clustered_points)

        assert heatmap[0] == (0.0, 0.0, 1)
        assert heatmap[3] == (10.0, 10.0, 1)
        assert len(heatmap) == 5


# ============================================================
# Statelessness Tests
# ============================================================

class TestStatelessness:
    """The analyzer must not carry state between calls."""

    def test_analyzer_does_not_store_results(self, clustered_points, one_km_grid_points):
        analyzer = MosaicAnalyzer(config=AnalysisConfig())

        first = analyzer.analyze(clustered_points)
        analyzer.analyze(one_km_grid_points)
        again = analyzer.analyze(clustered_points)

        assert first.model_dump() == again.model_dump()
        assert vars(analyzer) == {"config": analyzer.config}

    def test_concurrent_calls_are_isolated(self, clustered_points, one_km_grid_points):
        analyzer = MosaicAnalyzer(config=AnalysisConfig())
        expected = {
            "clustered": analyzer.analyze(clustered_points).model_dump(),
            "grid": analyzer.analyze(one_km_grid_points).model_dump(),
        }
        inputs = [("clustered", clustered_points), ("grid", one_km_grid_points)] * 20

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda item: (item[0], analyzer.analyze(item[1])), inputs))

        for key, result in results:
            assert result.model_dump() == expected[key]

    def test_zoom_uses_explicit_bounding_box(self, clustered_points):
        analyzer = MosaicAnalyzer(config=AnalysisConfig())
        result = analyzer.analyze(clustered_points)

        estimate = analyzer.get_optimal_zoom_level(result.detailed_analysis.bounding_box)

        assert estimate.zoom == 12
        assert estimate.pixel_coverage.endswith("K pixels")
        assert analyzer.get_optimal_zoom_level().pixel_coverage == "—"


# ============================================================
# Configuration Tests
# ============================================================

class TestConfiguration:
    """Tests for configuration handling."""

    def test_default_config(self):
        config = AnalysisConfig()

        assert config.overlap_threshold_degrees == 0.0002
        assert config.density_thresholds == DensityThresholds(low=10, medium=30, high=100)

    def test_analyzer_defaults_from_settings(self):
        analyzer = MosaicAnalyzer()

        assert analyzer.config == AnalysisConfig.from_settings()

    def test_larger_threshold_merges_groups(self, clustered_points):
        result = analyze(clustered_points, AnalysisConfig(overlap_threshold_degrees=20.0))

        assert len(result.overlap_groups) == 1

    def test_zero_threshold_groups_only_identical_points(self):
        points = [
            GeoPoint(name="a", latitude=1.0, longitude=1.0),
            GeoPoint(name="b", latitude=1.0, longitude=1.0),
            GeoPoint(name="c", latitude=1.0, longitude=1.00001),
        ]

        result = analyze(points, AnalysisConfig(overlap_threshold_degrees=0.0))

        assert [g.count for g in result.overlap_groups] == [2, 1]

    def test_negative_threshold_rejected(self):
        with pytest.raises(ValueError):
            AnalysisConfig(overlap_threshold_degrees=-0.1)

    def test_invalid_latitude_rejected(self):
        with pytest.raises(ValueError):
            GeoPoint(name="bad", latitude=91.0, longitude=0.0)

    def test_nan_rejected(self):
        with pytest.raises(ValueError):
            GeoPoint(name="bad", latitude=float("nan"), longitude=0.0)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
