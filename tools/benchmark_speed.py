"""
Performance Benchmark
=====================

Measures step throughput of the core game and the Gymnasium wrapper using
random moves on the bundled level.

Usage:
    python -m tools.benchmark_speed [--steps S] [--seed SEED] [--quick]
"""

from __future__ import annotations

import argparse
import sys
import time
import numpy as np

from willi.core.config_loader import load_config
from willi.core.game import CoreGame
from willi.core.env_gym import WilliEnv
from willi.core.movement import ACTION_DIRECTIONS


def benchmark_single_env(
    num_steps: int = 1000,
    seed: int = 42
) -> dict:
    """
    Benchmark single environment performance.
    
    Args:
        num_steps: Number of steps to run.
        seed: Random seed for the move sequence.
    
    Returns:
        Dict with timing results.
    """
    env = WilliEnv()
    rng = np.random.default_rng(seed)
    
    obs, _ = env.reset(seed=seed)
    start = time.perf_counter()
    resets = 0
    
    for _ in range(num_steps):
        action = int(rng.integers(0, env.action_space.n))
        obs, _, terminated, truncated, _ = env.step(action)
        if terminated or truncated:
            obs, _ = env.reset()
            resets += 1
    
    elapsed = time.perf_counter() - start
    env.close()
    
    return {
        "mode": "single",
        "num_steps": num_steps,
        "resets": resets,
        "elapsed_seconds": elapsed,
        "steps_per_second": num_steps / elapsed,
        "ms_per_step": (elapsed * 1000) / num_steps
    }


def benchmark_core_game(
    num_steps: int = 1000,
    seed: int = 42
) -> dict:
    """
    Benchmark raw CoreGame without Gym overhead.
    
    Args:
        num_steps: Number of steps.
        seed: Random seed for the move sequence.
    
    Returns:
        Dict with timing results.
    """
    config = load_config()
    game = CoreGame.from_file(config=config)
    rng = np.random.default_rng(seed)
    
    start = time.perf_counter()
    resets = 0
    
    for _ in range(num_steps):
        direction = ACTION_DIRECTIONS[int(rng.integers(0, len(ACTION_DIRECTIONS)))]
        result = game.step(direction)
        if result.terminated or result.truncated:
            game.reset()
            resets += 1
    
    elapsed = time.perf_counter() - start
    
    return {
        "mode": "core_game",
        "num_steps": num_steps,
        "resets": resets,
        "elapsed_seconds": elapsed,
        "steps_per_second": num_steps / elapsed,
        "ms_per_step": (elapsed * 1000) / num_steps
    }


def run_all_benchmarks(steps: int = 1000, seed: int = 42) -> list:
    """Run core and env benchmarks and print a summary table."""
    results = []
    
    print("=" * 60)
    print("WILLI ENVIRONMENT PERFORMANCE BENCHMARK")
    print("=" * 60)
    print()
    
    print("Benchmarking CoreGame (raw)...")
    results.append(benchmark_core_game(num_steps=steps, seed=seed))
    
    print("Benchmarking WilliEnv (single)...")
    results.append(benchmark_single_env(num_steps=steps, seed=seed))
    print()
    
    print(f"{'Mode':<20} {'Resets':>8} {'Steps/s':>12} {'ms/step':>10}")
    print("-" * 52)
    for r in results:
        print(f"{r['mode']:<20} {r['resets']:>8} "
              f"{r['steps_per_second']:>12.1f} {r['ms_per_step']:>10.3f}")
    
    return results


def main():
    parser = argparse.ArgumentParser(description="Benchmark Watch Out Willi performance")
    parser.add_argument("--steps", type=int, default=1000, help="Steps per benchmark")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument("--quick", action="store_true", help="Quick benchmark (fewer steps)")
    
    args = parser.parse_args()
    
    steps = 100 if args.quick else args.steps
    run_all_benchmarks(steps=steps, seed=args.seed)
    
    return 0


if __name__ == "__main__":
    sys.exit(main())
