from collections import OrderedDict

# Every policy sees the same two calls from CacheSimulator:
#   update(slot, blk, hit)  after each reference, with the slot blk now occupies
#   evict(slots)            on a fault, returning the index of the victim slot


# ─── 1. Baseline: LRU by history re-scan ───────────────────────────────────────
class LRUPolicy:
    """
    True LRU without a maintained recency order. On a fault the reference
    history is walked backwards until every resident page has been seen once;
    the last one found is the least recently used. O(N) per eviction.
    """

    def __init__(self, cache_size=None):
        self.history = []

    def update(self, slot, blk, hit=False):
        self.history.append(blk)

    def evict(self, slots):
        resident = set(slots)
        seen = set()
        for blk in reversed(self.history):
            if blk in resident and blk not in seen:
                seen.add(blk)
                if len(seen) == len(slots):
                    return slots.index(blk)
        raise RuntimeError("history does not cover the resident set")


# ─── 2. LRU with explicit recency order ───────────────────────────────────────
class OrderedLRUPolicy:
    """Same victims as LRUPolicy, O(1) amortized per reference."""

    def __init__(self, cache_size=None):
        self.order = OrderedDict()

    def update(self, slot, blk, hit=False):
        if blk in self.order:
            self.order.move_to_end(blk)
        else:
            self.order[blk] = slot

    def evict(self, slots):
        # oldest entry is always resident: evicted pages are dropped here
        _, slot = self.order.popitem(last=False)
        return slot


# ─── 3. FIFO ──────────────────────────────────────────────────────────────────
class FIFOPolicy:
    def __init__(self, cache_size):
        self.c = cache_size
        self.cursor = 0

    def update(self, slot, blk, hit=False):
        pass

    def evict(self, slots):
        victim = self.cursor
        self.cursor = (self.cursor + 1) % self.c
        return victim


# ─── 4. Clock (second chance) ─────────────────────────────────────────────────
class ClockPolicy:
    """
    FIFO ring with one use bit per slot. A hit sets the bit; the hand clears
    set bits as it sweeps and stops at the first clear one.
    """

    def __init__(self, cache_size):
        self.c = cache_size
        self.use = [0] * cache_size
        self.hand = 0

    def update(self, slot, blk, hit=False):
        if hit:
            self.use[slot] = 1
        else:
            # freshly loaded pages start without a second chance
            self.use[slot] = 0

    def evict(self, slots):
        while self.use[self.hand]:
            self.use[self.hand] = 0
            self.hand = (self.hand + 1) % self.c
        victim = self.hand
        self.hand = (self.hand + 1) % self.c
        return victim


POLICIES = OrderedDict([
    ("LRU",   LRUPolicy),
    ("FIFO",  FIFOPolicy),
    ("Clock", ClockPolicy),
])


def make_policy(name, cache_size):
    """Build a fresh policy by name ("LRU", "LRU-ordered", "FIFO", "Clock")."""
    if name == "LRU-ordered":
        return OrderedLRUPolicy(cache_size)
    try:
        factory = POLICIES[name]
    except KeyError:
        raise ValueError(f"Unknown policy: {name}") from None
    return factory(cache_size)
