"""Tests for simdiv.metacommunity module."""

import numpy as np
import pytest

from simdiv.diversity import DiversityResult, diversity_single
from simdiv.errors import InputShapeError
from simdiv.metacommunity import (
    aggregate,
    metacommunity_A,
    metacommunity_A_bar,
    metacommunity_B,
    metacommunity_B_bar,
    metacommunity_G,
    metacommunity_G_bar,
    metacommunity_R,
    metacommunity_R_bar,
)
from simdiv.subcommunity import subcommunity_alpha, subcommunity_alpha_bar
from simdiv.summary import summarise
from simdiv.tests.fixtures import (
    REFERENCE_COUNTS,
    REFERENCE_METACOMMUNITY_A_Q0,
    generate_edge_case_empty_subcommunity,
    generate_edge_case_single_subcommunity,
    generate_similarity_matrix,
    generate_synthetic_metacommunity,
)

QS = [0.0, 0.5, 1.0, 2.0, 3.0, np.inf]


class TestAggregate:
    def test_weighted_mean_at_q0(self):
        ds = DiversityResult(row_ids=["a", "b"], q_labels=["q0"], values=np.array([[1.0], [3.0]]))
        result = aggregate(ds, np.array([1.0, 3.0]))
        assert result.values[0, 0] == pytest.approx(2.5)
        assert result.row_ids == ["metacommunity"]
        assert result.q_labels == ["q0"]

    def test_complementary_order(self):
        ds = DiversityResult(row_ids=["a", "b"], q_labels=["q2", "qInf"], values=np.array([[1.0, 1.0], [4.0, 4.0]]))
        result = aggregate(ds, np.array([1.0, 1.0]), measure="custom")
        # order 1 - 2 = -1 is the harmonic mean; order -inf the minimum
        assert result.values[0, 0] == pytest.approx(2 / (1 + 0.25))
        assert result.values[0, 1] == 1.0
        assert result.measure == "custom"

    def test_nan_subcommunity_propagates(self):
        ds = DiversityResult(row_ids=["a", "b"], q_labels=["q1"], values=np.array([[2.0], [np.nan]]))
        assert np.isnan(aggregate(ds, np.array([1.0, 1.0])).values[0, 0])

    def test_nan_subcommunity_with_zero_weight_ignored(self):
        ds = DiversityResult(row_ids=["a", "b"], q_labels=["q1"], values=np.array([[2.0], [np.nan]]))
        assert aggregate(ds, np.array([1.0, 0.0])).values[0, 0] == pytest.approx(2.0)

    def test_weight_count_mismatch(self):
        ds = DiversityResult(row_ids=["a", "b"], q_labels=["q1"], values=np.ones((2, 1)))
        with pytest.raises(InputShapeError):
            aggregate(ds, np.ones(3))


class TestMetacommunityA:
    def test_pinned_reference(self):
        result = metacommunity_A(REFERENCE_COUNTS, [0], np.eye(2))
        assert result.values[0, 0] == pytest.approx(REFERENCE_METACOMMUNITY_A_Q0)
        assert result.measure == "metacommunity.A"

    def test_normalised_reference(self):
        result = metacommunity_A_bar(REFERENCE_COUNTS, [0])
        assert result.values[0, 0] == pytest.approx(0.25 * 2 + 0.25 * 1 + 0.5 * 2)
        assert result.measure == "metacommunity.A.bar"

    def test_single_subcommunity_equals_alpha(self):
        table = generate_edge_case_single_subcommunity()
        Z = generate_similarity_matrix(3)
        for normalise in (False, True):
            meta = metacommunity_A(table, QS, Z, normalise=normalise)
            sub = subcommunity_alpha(table, QS, Z, normalise=normalise)
            np.testing.assert_allclose(meta.values, sub.values, rtol=1e-12)

    def test_shape(self):
        table = generate_synthetic_metacommunity()
        result = metacommunity_A(table, QS)
        assert result.values.shape == (1, len(QS))
        assert result.row_ids == ["metacommunity"]

    def test_matches_manual_aggregation(self):
        table = generate_synthetic_metacommunity()
        Z = generate_similarity_matrix()
        sub = subcommunity_alpha_bar(table, QS, Z)
        weights = summarise(table, normalise=True).weights
        np.testing.assert_allclose(
            metacommunity_A_bar(table, QS, Z).values, aggregate(sub, weights).values
        )

    def test_high_order_even_communities(self):
        table = np.array([[10.0, 10.0], [10.0, 10.0]])
        result = metacommunity_A_bar(table, [2000.0])
        assert result.values[0, 0] == pytest.approx(2.0)


class TestMetacommunityG:
    def test_equals_pooled_diversity(self):
        table = generate_synthetic_metacommunity()
        Z = generate_similarity_matrix()
        totals = summarise(table, normalise=True).totals
        result = metacommunity_G_bar(table, QS, Z)
        expected = [diversity_single(totals, q, Z) for q in QS]
        np.testing.assert_allclose(result.values[0], expected, rtol=1e-9)

    def test_normalised_reference(self):
        result = metacommunity_G_bar(REFERENCE_COUNTS, [0, 2])
        np.testing.assert_allclose(result.values[0], [2.0, 1.6])

    def test_raw_measure_tag(self):
        assert metacommunity_G(REFERENCE_COUNTS, [0]).measure == "metacommunity.G"


class TestMetacommunityBR:
    def test_normalised_reference(self):
        B = metacommunity_B_bar(REFERENCE_COUNTS, [0])
        R = metacommunity_R_bar(REFERENCE_COUNTS, [0])
        assert B.values[0, 0] == pytest.approx(0.25 * 1 + 0.25 * 4 / 3 + 0.5 * 1)
        assert R.values[0, 0] == pytest.approx(0.25 * 1 + 0.25 * 0.75 + 0.5 * 1)

    def test_identical_subcommunities(self):
        counts = np.array([[10.0, 10.0], [30.0, 30.0], [60.0, 60.0]])
        Z = generate_similarity_matrix(3)
        np.testing.assert_allclose(metacommunity_B_bar(counts, QS, Z).values, np.ones((1, len(QS))))
        np.testing.assert_allclose(metacommunity_R_bar(counts, QS, Z).values, np.ones((1, len(QS))))

    def test_tags(self):
        assert metacommunity_B(REFERENCE_COUNTS, [0]).measure == "metacommunity.B"
        assert metacommunity_R(REFERENCE_COUNTS, [0]).measure == "metacommunity.R"
        assert metacommunity_R_bar(REFERENCE_COUNTS, [0]).measure == "metacommunity.R.bar"


class TestEmptySubcommunity:
    def test_normalised_ignores_zero_weight(self):
        table = generate_edge_case_empty_subcommunity()
        result = metacommunity_A_bar(table, [0, 1, 2])
        assert np.all(np.isfinite(result.values))

    def test_raw_ignores_zero_weight(self):
        table = generate_edge_case_empty_subcommunity()
        result = metacommunity_G(table, [0, 1, 2])
        assert np.all(np.isfinite(result.values))
