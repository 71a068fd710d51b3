import random

import numpy as np
import pytest

from knowhere.errors import KnowhereError
from knowhere.range_util import (
    RangeSearchResult,
    count_valid,
    distance_in_range,
    filter_one_query,
    filter_range_result,
    merge_range_results,
)

TEST_SETS = [
    (-10.0, -1.0),
    (-10.0, 0.0),
    (-10.0, 50.0),
    (0.0, 50.0),
    (0.0, 100.0),
    (50.0, 100.0),
    (50.0, 200.0),
    (100.0, 200.0),
]

NQ = 10


def gen_per_query(nq=NQ, seed=42):
    rng = random.Random(seed)
    labels, distances = [], []
    for _ in range(nq):
        num = rng.randint(0, 10)
        labels.append([rng.randint(0, 10000) for _ in range(num)])
        distances.append([rng.uniform(0.0, 100.0) for _ in range(num)])
    return labels, distances


def count_in_range(distances_per_query, radius, range_filter, is_ip):
    return sum(
        distance_in_range(d, radius, range_filter, is_ip)
        for query in distances_per_query
        for d in np.asarray(query, dtype=np.float32)
    )


def bounds(item, is_ip):
    low, high = item
    return (low, high) if is_ip else (high, low)


@pytest.mark.parametrize(
    "dist,expected",
    [(0.0, True), (1.0, False), (0.314, True), (-1.0, False), (1.23, False)],
)
def test_distance_in_range_l2(dist, expected):
    assert distance_in_range(dist, 1.0, 0.0, False) is expected


@pytest.mark.parametrize(
    "dist,expected",
    [(0.0, False), (1.0, True), (0.314, True), (-1.0, False), (1.23, False)],
)
def test_distance_in_range_ip(dist, expected):
    assert distance_in_range(dist, 0.0, 1.0, True) is expected


@pytest.mark.parametrize("item", TEST_SETS)
@pytest.mark.parametrize("is_ip", [True, False])
def test_get_range_search_result_per_query(item, is_ip):
    radius, range_filter = bounds(item, is_ip)
    gen_labels, gen_distances = gen_per_query()
    filtered = [
        filter_one_query(d, lab, is_ip, radius, range_filter)
        for d, lab in zip(gen_distances, gen_labels)
    ]
    result = merge_range_results([f[0] for f in filtered], [f[1] for f in filtered], NQ)
    assert result.lims[NQ] == count_in_range(gen_distances, radius, range_filter, is_ip)
    assert all(distance_in_range(d, radius, range_filter, is_ip) for d in result.distances)


@pytest.mark.parametrize("item", TEST_SETS)
@pytest.mark.parametrize("is_ip", [True, False])
def test_get_range_search_result_flat(item, is_ip):
    radius, range_filter = bounds(item, is_ip)
    gen_labels, gen_distances = gen_per_query()
    res = merge_range_results(gen_distances, gen_labels, NQ)
    out = filter_range_result(res, is_ip, radius, range_filter)
    expected = count_in_range(gen_distances, radius, range_filter, is_ip)
    assert out.lims[NQ] == expected
    assert count_valid(res, is_ip, radius, range_filter)[-1] == expected
    assert out.nq == NQ


def test_filter_keeps_per_query_order():
    res = RangeSearchResult([0, 3, 4], [5, 6, 7, 8], [0.5, 2.0, 0.1, 0.9])
    out = filter_range_result(res, False, 1.0, 0.0)
    assert out.lims.tolist() == [0, 2, 3]
    assert out.labels.tolist() == [5, 7, 8]
    d, lab = out.query(0)
    assert lab.tolist() == [5, 7]


def test_filter_rejects_filtered_ids():
    res = RangeSearchResult([0, 2], [1, 3], [0.1, 0.2])
    bitset = [False, False, False, True]
    with pytest.raises(KnowhereError):
        filter_range_result(res, False, 1.0, 0.0, bitset)


def test_filter_accepts_unfiltered_ids():
    res = RangeSearchResult([0, 2], [0, 1], [0.1, 5.0])
    out = filter_range_result(res, False, 1.0, 0.0, [False, False, True])
    assert out.labels.tolist() == [0]


def test_filter_one_query_size_mismatch():
    with pytest.raises(KnowhereError):
        filter_one_query([0.1, 0.2], [1], False, 1.0, 0.0)


def test_filter_one_query_values():
    d, lab = filter_one_query([0.5, 3.0, 0.7], [10, 11, 12], False, 1.0, 0.0)
    assert lab.tolist() == [10, 12]
    assert len(d) == 2


def test_merge_wrong_nq():
    with pytest.raises(KnowhereError):
        merge_range_results([[0.1]], [[1]], 2)


def test_merge_empty_queries():
    res = merge_range_results([[], []], [[], []], 2)
    assert res.lims.tolist() == [0, 0, 0]
    assert res.total == 0


def test_result_validates_lengths():
    with pytest.raises(KnowhereError):
        RangeSearchResult([0, 2], [1], [0.1, 0.2])


def test_iteration_matches_query():
    labels, distances = gen_per_query()
    res = merge_range_results(distances, labels, NQ)
    for i, (d, lab) in enumerate(res):
        qd, ql = res.query(i)
        assert lab.tolist() == ql.tolist() == labels[i]