"""Tests for cosine similarity and best-of aggregation."""

import math

import pytest

from memhub.knowledge_base.retrieval.similarity import best_similarity, cosine_similarity


class TestCosineSimilarity:

    def test_identical_unit_vectors(self):
        assert cosine_similarity([1, 0], [1, 0]) == 1.0

    def test_orthogonal_vectors(self):
        assert cosine_similarity([1, 0], [0, 1]) == 0.0

    def test_identical_non_unit_vectors(self):
        assert cosine_similarity([1, 1], [1, 1]) == pytest.approx(1.0)

    def test_matches_hand_computed_value(self):
        a, b = [1.0, 2.0, 3.0], [4.0, 5.0, 6.0]
        expected = 32.0 / (math.sqrt(14.0) * math.sqrt(77.0))
        assert cosine_similarity(a, b) == pytest.approx(expected)

    @pytest.mark.parametrize("a, b", [
        ([0.1, 0.7, -0.3], [0.9, -0.2, 0.4]),
        ([3.0, -4.0], [-12.5, 0.25]),
        ([1.0, 2.0, 3.0, 4.0], [-4.0, 3.0, -2.0, 1.0]),
        ([-0.5, -1.5, 2.0], [10.0, 20.0, -30.0]),
    ])
    def test_symmetric(self, a, b):
        assert cosine_similarity(a, b) == cosine_similarity(b, a)

    def test_opposite_vectors(self):
        assert cosine_similarity([1, 0], [-1, 0]) == -1.0

    def test_zero_vector_scores_zero(self):
        assert cosine_similarity([0, 0], [1, 1]) == 0.0
        assert cosine_similarity([1, 1], [0, 0]) == 0.0

    def test_dimension_mismatch_raises(self):
        with pytest.raises(ValueError):
            cosine_similarity([1, 0, 0], [1, 0])


class TestBestSimilarity:

    def test_takes_maximum_not_mean_or_first(self):
        candidate = [1.0, 0.0]
        queries = [
            [0.0, 1.0],   # 0.0
            [1.0, 1.0],   # ~0.707
            [1.0, 0.0],   # 1.0
        ]
        pairwise = [cosine_similarity(q, candidate) for q in queries]

        score = best_similarity(queries, candidate)

        assert score == max(pairwise)
        assert score != pairwise[0]
        assert score != pytest.approx(sum(pairwise) / len(pairwise))

    def test_ignores_query_vectors_of_other_dimension(self):
        score = best_similarity([[1.0, 0.0, 0.0], [0.0, 1.0]], [0.0, 1.0])
        assert score == 1.0

    def test_none_when_nothing_comparable(self):
        assert best_similarity([[1.0, 0.0, 0.0]], [1.0, 0.0]) is None
        assert best_similarity([], [1.0, 0.0]) is None
