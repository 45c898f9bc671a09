# main.py
import argparse
import json
import logging
import os
import sys

from benchmark import BenchmarkRunner
from cache import Cache
from exceptions import CacheSimError, ConfigurationError
from instruction import Interpreter, parse_program
from visualize import plot_evictions, plot_hit_miss_rate, plot_latency_histogram

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    "cache": {"capacity": 64},
    "memory": {"sram_latency_ns": 10, "dram_latency_ns": 100},
    "benchmark": {
        "num_requests": 10000,
        "address_space": 256,
        "read_ratio": 0.6,
        "write_ratio": 0.2,
        "access_pattern": "mixed",
        "random_seed": 42,
    },
    "output": {
        "results_dir": "results",
        "hitmiss_plot": "results/hit_miss_rate.png",
        "eviction_plot": "results/evictions.png",
        "latency_plot": "results/latency.png",
    },
}

def configure_logging(verbose=False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

def load_config(path="config.json"):
    """
    Read a JSON config and merge it over the defaults, section by section.
    A missing default path is fine; an explicit unreadable file is not.
    """
    cfg = {section: dict(values) for section, values in DEFAULT_CONFIG.items()}
    if path is None or (path == "config.json" and not os.path.exists(path)):
        return cfg
    try:
        with open(path, "r") as f:
            loaded = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"cannot load config {path}: {e}") from e
    if not isinstance(loaded, dict):
        raise ConfigurationError(f"config {path} must hold a JSON object")
    for section, values in loaded.items():
        if not isinstance(values, dict):
            raise ConfigurationError(f"config section {section!r} must be an object")
        cfg.setdefault(section, {}).update(values)

    capacity = cfg["cache"].get("capacity")
    if not isinstance(capacity, int) or capacity < 1:
        raise ConfigurationError(f"cache.capacity must be a positive integer, got {capacity!r}")
    return cfg

def run_program(lines, capacity, out=None):
    program = parse_program(lines)
    cache = Cache(capacity)
    Interpreter(cache, out).run(program)
    released = cache.clear()
    dirty = sum(1 for entry in released if not entry.in_sync)
    logger.info("cache released %d lines (%d need write-back)", len(released), dirty)

def run_benchmark(cfg):
    runner = BenchmarkRunner(cfg)
    logger.info("Starting benchmark with config: %s", cfg["benchmark"])
    summary, latencies = runner.run()
    results_path = runner.save_results(summary, cfg["output"])
    print("Benchmark Summary:", json.dumps(summary, indent=2))
    print("Results saved to:", results_path)

    out_cfg = cfg["output"]
    plot_hit_miss_rate(summary, out_cfg.get("hitmiss_plot", "results/hit_miss_rate.png"))
    plot_evictions(summary, out_cfg.get("eviction_plot", "results/evictions.png"))
    plot_latency_histogram(latencies, out_cfg.get("latency_plot", "results/latency.png"))
    logger.info("Plots saved in %s", out_cfg.get("results_dir", "results"))
    return summary

def build_parser():
    parser = argparse.ArgumentParser(description="Parity-evicting memory cache simulator")
    parser.add_argument("--config", default="config.json", help="JSON config file")
    parser.add_argument("--capacity", type=int, help="override cache.capacity")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="execute an instruction file")
    run.add_argument("program", help="instruction file, or - for stdin")

    sub.add_parser("bench", help="run the synthetic benchmark and plot results")
    return parser

def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    try:
        cfg = load_config(args.config)
        if args.capacity is not None:
            if args.capacity < 1:
                raise ConfigurationError(f"--capacity must be positive, got {args.capacity}")
            cfg["cache"]["capacity"] = args.capacity

        if args.command == "run":
            if args.program == "-":
                run_program(sys.stdin.read().splitlines(), cfg["cache"]["capacity"])
            else:
                with open(args.program, "r") as f:
                    lines = f.read().splitlines()
                run_program(lines, cfg["cache"]["capacity"])
        else:
            run_benchmark(cfg)
    except (CacheSimError, OSError) as e:
        logger.error("%s", e)
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
