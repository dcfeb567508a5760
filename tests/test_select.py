import numpy as np
import pytest
from editk.core.select import Selection, Selector, _quickselect_kernel

STRATEGIES = list(Selection)


class TestSelection:
    def test_coerce_name(self):
        assert Selection.coerce('quickselect') is Selection.QUICKSELECT
        assert Selection.coerce('SORT') is Selection.SORT

    def test_coerce_value(self):
        assert Selection.coerce(2) is Selection.INTROSELECT
        assert Selection.coerce(Selection.SORT) is Selection.SORT

    def test_coerce_unknown(self):
        with pytest.raises(ValueError, match="Unknown selection strategy"):
            Selection.coerce('bubble')

    def test_every_strategy_registered(self):
        for strategy in STRATEGIES:
            assert Selector(strategy).strategy is strategy


class TestSelector:
    @pytest.mark.parametrize('strategy', STRATEGIES)
    def test_matches_stable_sort(self, strategy):
        rng = np.random.default_rng(42)
        select = Selector(strategy, rng=0)
        for _ in range(200):
            n = int(rng.integers(1, 40))
            k = int(rng.integers(1, 15))
            distances = rng.integers(0, 6, size=n)
            expected = np.argsort(distances, kind='stable')[:k]
            np.testing.assert_array_equal(select(distances, k), expected)

    @pytest.mark.parametrize('strategy', STRATEGIES)
    def test_returns_all_when_k_exceeds_n(self, strategy):
        distances = np.array([4, 1, 3, 1])
        np.testing.assert_array_equal(Selector(strategy)(distances, 10), [1, 3, 2, 0])

    def test_ties_keep_generation_order(self):
        distances = np.array([2, 2, 2, 2, 2])
        np.testing.assert_array_equal(Selector(Selection.QUICKSELECT, rng=3)(distances, 3), [0, 1, 2])

    def test_quickselect_independent_of_seed(self):
        distances = np.random.default_rng(1).integers(0, 4, size=30)
        results = {tuple(Selector('quickselect', rng=seed)(distances, 10)) for seed in range(20)}
        assert len(results) == 1

    def test_accepts_generator(self):
        rng = np.random.default_rng(5)
        select = Selector(Selection.QUICKSELECT, rng=rng)
        np.testing.assert_array_equal(select(np.array([3, 0, 2, 1]), 2), [1, 3])


class TestQuickselectKernel:
    def test_partitions_around_kth(self):
        rng = np.random.default_rng(7)
        for _ in range(100):
            n = int(rng.integers(2, 50))
            k = int(rng.integers(1, n + 1))
            keys = rng.permutation(n).astype(np.int64)
            order = rng.permutation(n).astype(np.int64)
            out = _quickselect_kernel(keys, order, k)
            assert sorted(out.tolist()) == list(range(n))
            if k < n: assert keys[out[:k]].max() < keys[out[k:]].min()
            assert set(keys[out[:k]].tolist()) == set(range(k))
