import math
import heapq
import random
from itertools import chain
from operator import itemgetter

import pytest

import multimerge
from multimerge.apps.compares import CountingInt, comparisons, no_overlap, interleaved


# ============================================================================
@pytest.fixture(params=[0, 1, 2, 3])
def rng(request):
    return random.Random(request.param)


def make_inputs(rng, key, reverse, n_sources=8):
    return [sorted([(rng.choice('ABCD'), rng.randrange(50))
                    for _ in range(rng.randrange(30))],
                   key=key, reverse=reverse)
            for _ in range(n_sources)]


@pytest.mark.parametrize('key', [None, itemgetter(0), itemgetter(1)],
                         ids=['none', 'item0', 'item1'])
@pytest.mark.parametrize('reverse', [False, True])
def test_drop_in_for_heapq(rng, key, reverse):
    inputs = make_inputs(rng, key, reverse)

    expected = list(heapq.merge(*inputs, key=key, reverse=reverse))
    res = list(multimerge.merge(*inputs, key=key, reverse=reverse))

    assert res == expected
    assert res == sorted(chain(*inputs), key=key, reverse=reverse)


def test_generators_and_iterators_mixed(rng):
    data = sorted(rng.randrange(1000) for _ in range(300))
    sources = [iter(data[0::3]), (x for x in data[1::3]), tuple(data[2::3])]
    assert list(multimerge.merge(*sources)) == data


def test_no_overlap_fewer_comparisons_than_elements_times_log():
    data = no_overlap(16, 100)
    lt, eq = comparisons(multimerge.merge, data)
    # k=16 sources, at most two comparisons per heap level per element
    assert lt <= 16 * 100 * 2 * 4 + 2 * 16


def test_interleaved_output():
    res = list(multimerge.merge(*interleaved(4, 25)))
    assert res == list(range(100))


def single_element_sources(rng, n_sources):
    values = list(range(n_sources))
    rng.shuffle(values)
    return [[CountingInt(x)] for x in values]


def short_sources(rng, n_sources, size):
    values = list(range(n_sources * size))
    rng.shuffle(values)
    return [sorted(map(CountingInt, values[i::n_sources]))
            for i in range(n_sources)]


def log_bound(n_elements, n_sources):
    # heapify plus at most two comparisons per level for each element
    return 2 * n_elements * math.ceil(math.log2(n_sources)) + 2 * n_sources


def test_exhausting_many_sources_is_logarithmic(rng):
    data = single_element_sources(rng, 4000)

    hq_lt, hq_eq = comparisons(heapq.merge, data)
    lt, eq = comparisons(multimerge.merge, data)

    assert eq == 0
    assert lt <= log_bound(4000, 4000)
    assert lt <= hq_lt + hq_eq


def test_many_short_sources_is_logarithmic(rng):
    data = short_sources(rng, 256, 8)

    hq_lt, hq_eq = comparisons(heapq.merge, data)
    lt, eq = comparisons(multimerge.merge, data)

    assert eq == 0
    assert lt <= log_bound(256 * 8, 256)
    assert lt <= hq_lt + hq_eq


def test_reverse_exhaustion_is_logarithmic(rng):
    data = [list(reversed(source)) for source in short_sources(rng, 512, 2)]
    lt, eq = comparisons(lambda *its: multimerge.merge(*its, reverse=True), data)
    assert lt <= log_bound(512 * 2, 512)
