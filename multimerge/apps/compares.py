"""
Count the key comparisons a merge function makes on two standard datasets

>>> lt, eq = comparisons(merge, [[CountingInt(1), CountingInt(3)], [CountingInt(2)]])
>>> eq
0
>>> lt > 0
True
"""

import heapq
import logging
from collections import OrderedDict

from multimerge.utils.merge import merge


logger = logging.getLogger(__name__)


#=============================================================================
class CountingInt(int):
    """int that counts how often it is compared, class wide"""
    lt = eq = 0

    def __lt__(self, other):
        CountingInt.lt += 1
        return int.__lt__(self, other)

    def __eq__(self, other):
        CountingInt.eq += 1
        return int.__eq__(self, other)

    __hash__ = int.__hash__

    @classmethod
    def reset(cls):
        cls.lt = cls.eq = 0


#=============================================================================
def comparisons(mergefunc, iterables):
    """Drain mergefunc(*iterables) and return the (lt, eq) counts"""
    CountingInt.reset()
    for _ in mergefunc(*iterables):
        pass
    return CountingInt.lt, CountingInt.eq


def no_overlap(n_sources=16, size=1000):
    """(0..999), (1000..1999), (2000..2999), ..."""
    return [list(map(CountingInt, range(x, x + size)))
            for x in range(0, n_sources * size, size)]


def interleaved(n_sources=16, size=1000):
    """(0,16,32,...), (1,17,33,...), (2,18,34,...), ..."""
    total = n_sources * size
    return [list(map(CountingInt, range(x, total, n_sources)))
            for x in range(n_sources)]


DATASETS = OrderedDict([('No overlap', no_overlap),
                        ('Interleaved', interleaved)])

MERGE_FUNCS = OrderedDict([('heapq.merge', heapq.merge),
                           ('multimerge.merge', merge)])


#=============================================================================
def run_benchmark(mergefuncs=None, n_sources=16, size=1000):
    """Return {mergefunc name: {dataset name: (lt, eq)}}"""
    mergefuncs = mergefuncs or MERGE_FUNCS
    results = OrderedDict()

    for func_name, mergefunc in mergefuncs.items():
        results[func_name] = OrderedDict()
        for data_name, make_data in DATASETS.items():
            counts = comparisons(mergefunc, make_data(n_sources, size))
            logger.debug('{0} / {1}: {2}'.format(func_name, data_name, counts))
            results[func_name][data_name] = counts

    return results


def format_results(results):
    lines = []
    for func_name, datasets in results.items():
        lines.append('{0:=^26}'.format(' ' + func_name + ' '))
        for data_name, (lt, eq) in datasets.items():
            lines.append('{0}: {1:,} lt; {2:,} eq'.format(data_name, lt, eq))
        lines.append('')

    return '\n'.join(lines)
