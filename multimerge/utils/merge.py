"""
Lazy k-way merge of sorted iterables, interchangeable with heapq.merge

Each source keeps at most one pending entry in a heapq heap. The element
handed out by the previous ``__next__`` is only replaced, by pulling its
source again, at the start of the following ``__next__``, so nothing a source
or key function raises can cost an element that was already selected.

Errors raised by sources, by the key function or by comparing keys are never
swallowed: only ``StopIteration`` from a source ends that source.
"""

from heapq import heapify, heappop, heapreplace


#=============================================================================
class HeapEntry(object):
    """Pending element of one source, smallest key first.

    ``__lt__`` makes a single key comparison: on a tie the lower source
    order wins, so the comparison is chosen to answer for the entry holding it.
    """
    __slots__ = ('key', 'order', 'value', 'next')

    def __init__(self, key, order, value, next_):
        self.key = key
        self.order = order
        self.value = value
        self.next = next_

    def __lt__(self, other):
        if self.order < other.order:
            return not (other.key < self.key)
        return self.key < other.key

    def __repr__(self):
        return '{0}({1!r}, {2!r}, {3!r})'.format(self.__class__.__name__,
                                                 self.key,
                                                 self.order,
                                                 self.value)


#=============================================================================
class ReversedHeapEntry(HeapEntry):
    """Pending element of one source, largest key first"""
    __slots__ = ()

    def __lt__(self, other):
        if self.order < other.order:
            return not (self.key < other.key)
        return other.key < self.key


#=============================================================================
class MergeIterator(object):
    """Iterator over the merged output of several sorted iterables.

    Nothing is pulled, and the key function is not touched, until the
    first call to ``__next__``.
    """

    def __init__(self, iterables, key=None, reverse=False):
        """
        :param tuple iterables: the sorted inputs
        :param key: optional one-argument function extracting the sort key
        :param bool reverse: inputs are sorted largest to smallest
        """
        self._sources = enumerate(iterables)
        self._key = key
        self._entry_cls = ReversedHeapEntry if reverse else HeapEntry
        self._heap = []

        # heap[0] was handed out and its source must be pulled again
        self._emitted = False

        # heap order must be rebuilt before selecting
        self._dirty = False

    def __iter__(self):
        return self

    def __next__(self):
        if self._sources is not None:
            self._seed()
        elif self._emitted:
            self._refill()

        heap = self._heap
        if self._dirty:
            heapify(heap)
            self._dirty = False

        if not heap:
            self._key = None
            raise StopIteration

        entry = heap[0]
        value = entry.value
        entry.value = None
        self._emitted = True
        return value

    def _compute_key(self, value):
        if self._key is None:
            return value

        try:
            return self._key(value)
        except StopIteration as si:
            raise RuntimeError('merge key function raised StopIteration') from si

    def _seed(self):
        # enumerate() has already moved past a source that raises here,
        # so a later call resumes with the next one
        heap = self._heap
        entry_cls = self._entry_cls
        self._dirty = True

        for order, iterable in self._sources:
            next_ = iter(iterable).__next__
            try:
                value = next_()
            except StopIteration:
                continue

            heap.append(entry_cls(self._compute_key(value), order, value, next_))

        self._sources = None

    def _refill(self):
        heap = self._heap
        entry = heap[0]
        self._emitted = False

        # heapq keeps the list a permutation of its entries if a comparison
        # raises, so a failed sift only needs a heapify on the next call
        try:
            value = entry.next()
        except StopIteration:
            self._dirty = True
            heappop(heap)
            self._dirty = False
            return
        except BaseException:
            self._discard_root()
            raise

        try:
            entry.key = self._compute_key(value)
        except BaseException:
            self._discard_root()
            raise

        entry.value = value
        self._dirty = True
        heapreplace(heap, entry)
        self._dirty = False

    def _discard_root(self):
        # no comparisons here, so the error being raised is the one surfaced
        heap = self._heap
        last = heap.pop()
        if heap:
            heap[0] = last
            self._dirty = True


#=============================================================================
def merge(*iterables, key=None, reverse=False):
    '''Merge multiple sorted inputs into a single sorted output.

    Similar to sorted(itertools.chain(*iterables)) but returns an iterator,
    does not pull the data into memory all at once, and assumes that each of
    the input streams is already sorted (smallest to largest).

    >>> list(merge([1,3,5,7], [0,2,4,8], [5,10,15,20], [], [25]))
    [0, 1, 2, 3, 4, 5, 5, 7, 8, 10, 15, 20, 25]

    If *key* is not None, applies a key function to each element to determine
    its sort order.

    >>> list(merge(['dog', 'horse'], ['cat', 'fish', 'kangaroo'], key=len))
    ['dog', 'cat', 'fish', 'horse', 'kangaroo']

    If *reverse* is True, the inputs are sorted largest to smallest and so
    is the output.

    >>> list(merge([3, 2, 1], [6, 5, 4], reverse=True))
    [6, 5, 4, 3, 2, 1]
    '''
    return MergeIterator(iterables, key=key, reverse=reverse)
