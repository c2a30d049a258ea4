# simulator.py

import argparse
import os
import sys
import time

import numpy as np

from policies import POLICIES, make_policy
from workload import generate_trace


class ConfigError(ValueError):
    """Simulation parameters that cannot describe a valid run."""


class ReportError(OSError):
    """The results file could not be created."""


class CacheSimulator:
    def __init__(self, cache_size, policy):
        if cache_size <= 0:
            raise ValueError(f"Cache size must be positive, got {cache_size}")
        self.cache_size = cache_size
        self.policy     = policy
        self.slots      = []      # resident set, slot order matters to FIFO/Clock
        self.hits       = 0
        self.misses     = 0
        self.faults     = 0       # misses that forced an eviction

    def access_block(self, block_id):
        blk = int(block_id)

        if blk in self.slots:
            self.hits += 1
            self.policy.update(self.slots.index(blk), blk, hit=True)
            return

        self.misses += 1
        if len(self.slots) < self.cache_size:
            slot = len(self.slots)
            self.slots.append(blk)
        else:
            slot = self.policy.evict(self.slots)
            self.slots[slot] = blk
            self.faults += 1
        self.policy.update(slot, blk, hit=False)


def count_faults(factory, trace, cache_size):
    """Replay trace against a fresh policy and return its fault count."""
    sim = CacheSimulator(cache_size, factory(cache_size))
    for blk in trace:
        sim.access_block(blk)
    return sim.faults


class SimulationConfig:
    def __init__(self, trials=1000, low=4, high=20, trace_length=1000,
                 region_size=100, region_stride=10, mean=10, sd=2):
        self.trials        = trials
        self.low           = low
        self.high          = high
        self.trace_length  = trace_length
        self.region_size   = region_size
        self.region_stride = region_stride
        self.mean          = mean
        self.sd            = sd

    @property
    def capacities(self):
        return range(self.low, self.high + 1)

    def validate(self):
        if self.trials <= 0:
            raise ConfigError(f"trial count must be positive, got {self.trials}")
        if self.low <= 0:
            raise ConfigError(f"working set sizes must be positive, got low={self.low}")
        if self.low > self.high:
            raise ConfigError(f"empty working set range: low={self.low} > high={self.high}")
        if self.trace_length <= 0:
            raise ConfigError(f"trace length must be positive, got {self.trace_length}")
        if self.region_size <= 0:
            raise ConfigError(f"region size must be positive, got {self.region_size}")
        if self.sd < 0:
            raise ConfigError(f"standard deviation must be non-negative, got {self.sd}")
        return self


class ResultTable:
    """Averaged faults, one row per working set size, one column per policy."""

    def __init__(self, capacities, policies, averages):
        self.capacities = list(capacities)
        self.policies   = list(policies)
        self.averages   = np.array(averages, dtype=np.int64)
        self.averages.flags.writeable = False

    def __getitem__(self, wss):
        row = self.averages[self.capacities.index(wss)]
        return dict(zip(self.policies, (int(v) for v in row)))

    def rows(self):
        for wss, row in zip(self.capacities, self.averages):
            yield (wss, *(int(v) for v in row))


def run_monte_carlo(config, rng, factories=None, progress=None):
    """
    Average fault counts over config.trials independent traces.

    Each trial draws one fresh trace from rng and replays it through every
    policy at every working set size. Totals are floor-divided by the trial
    count at the end, so fractional averages are truncated.
    """
    config.validate()
    if factories is None:
        factories = POLICIES
    capacities = list(config.capacities)
    totals = np.zeros((len(capacities), len(factories)), dtype=np.int64)

    for i in range(config.trials):
        if progress is not None:
            progress(i + 1, config.trials)

        trace = generate_trace(rng,
                               length=config.trace_length,
                               region_size=config.region_size,
                               region_stride=config.region_stride,
                               mean=config.mean,
                               sd=config.sd).tolist()

        for row, wss in enumerate(capacities):
            for col, factory in enumerate(factories.values()):
                totals[row, col] += count_faults(factory, trace, wss)

    return ResultTable(capacities, factories.keys(), totals // config.trials)


def write_report(table, directory=".", prefix="faults", when=None):
    """Write table as wss,LRU,FIFO,Clock CSV named after the current time."""
    stamp = time.strftime("%m-%d-%Y_%H:%M:%S", time.localtime(when))
    path = os.path.join(directory, f"{prefix}_{stamp}.csv")
    try:
        with open(path, "w") as f:
            np.savetxt(f, np.column_stack([table.capacities, table.averages]),
                       fmt="%d", delimiter=",", comments="",
                       header=",".join(["wss", *table.policies]))
    except OSError as e:
        raise ReportError(e.errno, f"Failed to create file {path}", path) from e
    return path


def print_progress(trial, total):
    end = "\n" if trial % 5 == 0 or trial == total else "\t"
    print(f"Running traces... ({trial}/{total})", end=end, flush=True)


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        description="Monte Carlo comparison of LRU, FIFO and Clock page replacement")
    p.add_argument("-t", "--trials", type=int, default=1000, help="Number of traces to average over")
    p.add_argument("--low", type=int, default=4, help="Smallest working set size")
    p.add_argument("--high", type=int, default=20, help="Largest working set size")
    p.add_argument("-n", "--trace-length", type=int, default=1000, help="References per trace")
    p.add_argument("--region-size", type=int, default=100, help="References per locality region")
    p.add_argument("--region-stride", type=int, default=10, help="Page id offset between regions")
    p.add_argument("--mean", type=float, default=10, help="Mean page offset within a region")
    p.add_argument("--sd", type=float, default=2, help="Standard deviation of the page offset")
    p.add_argument("--seed", type=int, default=None, help="RNG seed (default: wall clock)")
    p.add_argument("--fast-lru", action="store_true",
                   help="Use the ordered-dict LRU instead of the history re-scan (same results)")
    p.add_argument("--outdir", type=str, default=".", help="Directory for the CSV report")
    p.add_argument("-q", "--quiet", action="store_true", help="No per-trial progress")
    return p, p.parse_args(argv)


def main(argv=None):
    parser, args = parse_args(argv)
    config = SimulationConfig(trials=args.trials, low=args.low, high=args.high,
                              trace_length=args.trace_length,
                              region_size=args.region_size,
                              region_stride=args.region_stride,
                              mean=args.mean, sd=args.sd)
    try:
        config.validate()
    except ConfigError as e:
        parser.error(str(e))

    seed = args.seed if args.seed is not None else time.time_ns()
    rng = np.random.default_rng(seed)

    factories = dict(POLICIES)
    if args.fast_lru:
        factories["LRU"] = lambda k: make_policy("LRU-ordered", k)

    print(f"\n=== Monte Carlo: {config.trials} trials, wss {config.low}..{config.high}, "
          f"trace length {config.trace_length} (seed {seed}) ===")
    start = time.time()
    table = run_monte_carlo(config, rng, factories=factories,
                            progress=None if args.quiet else print_progress)
    elapsed = time.time() - start

    for wss, *faults in table.rows():
        cols = ", ".join(f"{name}: {v:4d}" for name, v in zip(table.policies, faults))
        print(f"  wss={wss:3d} → {cols}")
    print(f"Finished in {elapsed:.2f}s")

    try:
        path = write_report(table, directory=args.outdir)
    except ReportError as e:
        print(f"ERROR: {e.strerror}")
        return 1
    print(f"Results written to {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
