"""Data-mask benchmarks: lazy filters over column tables versus hand-written jax.numpy."""

from __future__ import annotations

import argparse
import json
import math
import time
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path

import jax.numpy as jnp

from lazyeval_jax import as_lazy, columns, evaluate, interp, lazy_eval, parse


@dataclass(frozen=True)
class TimingRow:
    section: str
    size: int
    engine: str
    mean_ms: float
    p50_ms: float
    p95_ms: float
    min_ms: float
    max_ms: float
    repeats: int
    samples: int
    note: str


def _block(value: object) -> None:
    if hasattr(value, "block_until_ready"):
        value.block_until_ready()


def _percentile(values: list[float], q: float) -> float:
    ordered = sorted(values)
    if len(ordered) == 1:
        return ordered[0]
    pos = (len(ordered) - 1) * q
    lo = int(math.floor(pos))
    hi = int(math.ceil(pos))
    if lo == hi:
        return ordered[lo]
    alpha = pos - lo
    return ordered[lo] * (1.0 - alpha) + ordered[hi] * alpha


def _time_samples(fn, *, repeats: int, samples: int, warmup: int = 1) -> tuple[float, float, float, float, float]:
    for _ in range(warmup):
        _block(fn())
    rows: list[float] = []
    for _ in range(samples):
        start = time.perf_counter()
        for _ in range(repeats):
            _block(fn())
        end = time.perf_counter()
        rows.append((end - start) * 1e3 / repeats)
    return (
        sum(rows) / len(rows),
        _percentile(rows, 0.50),
        _percentile(rows, 0.95),
        min(rows),
        max(rows),
    )


def _row(section: str, size: int, engine: str, stats, *, repeats: int, samples: int, note: str) -> TimingRow:
    return TimingRow(
        section=section,
        size=size,
        engine=engine,
        mean_ms=stats[0],
        p50_ms=stats[1],
        p95_ms=stats[2],
        min_ms=stats[3],
        max_ms=stats[4],
        repeats=repeats,
        samples=samples,
        note=note,
    )


def _cars(size: int) -> dict[str, object]:
    mpg = jnp.linspace(10.0, 40.0, size, dtype=jnp.float32)
    cyl = jnp.where(mpg > 25.0, 4, 8)
    return columns({"mpg": mpg, "cyl": cyl})


def _bench_mask(size: int, *, samples: int) -> list[TimingRow]:
    repeats = max(1, 20_000 // size)
    cars = _cars(size)
    source = "mpg > 31 & cyl == 4"
    captured = as_lazy(source)
    spliced = interp("column > threshold & cyl == 4", column=parse("mpg"), threshold=31)

    direct = _time_samples(
        lambda: jnp.logical_and(cars["mpg"] > 31, cars["cyl"] == 4),
        repeats=repeats,
        samples=samples,
    )
    evaluated = _time_samples(lambda: evaluate(captured, cars), repeats=repeats, samples=samples)
    from_text = _time_samples(lambda: lazy_eval(source, cars), repeats=repeats, samples=samples)
    interpolated = _time_samples(lambda: evaluate(spliced, cars), repeats=repeats, samples=samples)

    common = {"repeats": repeats, "samples": samples}
    return [
        _row("mask", size, "jnp_direct", direct, note="hand-written jax.numpy", **common),
        _row("mask", size, "evaluate", evaluated, note="evaluate(as_lazy(source), columns)", **common),
        _row("mask", size, "lazy_eval_text", from_text, note="lazy_eval(source) with parse cache", **common),
        _row("mask", size, "interp_evaluate", interpolated, note="evaluate(interp(template, ...))", **common),
    ]


def _bench_scalar(*, samples: int) -> TimingRow:
    repeats = 2_000
    value = as_lazy("a * b + c ^ 2")
    env = {"a": 3, "b": 4, "c": 5}
    stats = _time_samples(lambda: evaluate(value, env), repeats=repeats, samples=samples)
    return _row("scalar", 1, "evaluate", stats, repeats=repeats, samples=samples, note="operator fast path")


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--sizes", default="512,8192,131072", help="comma-separated column lengths")
    parser.add_argument("--samples", type=int, default=3, help="timing samples per workload")
    parser.add_argument("--json-out", default="", help="optional output path")
    args = parser.parse_args()

    sizes = [int(x.strip()) for x in args.sizes.split(",") if x.strip()]
    rows: list[TimingRow] = []

    print("Data-mask benchmarks")
    print(f"sizes={sizes}, samples={args.samples}")
    print()

    rows.append(_bench_scalar(samples=args.samples))
    for size in sizes:
        rows.extend(_bench_mask(size, samples=args.samples))

    print("section  size     engine            mean(ms)   p95(ms)")
    print("-------  -------  ----------------  ---------  --------")
    for row in rows:
        print(f"{row.section:7} {row.size:8d}  {row.engine:16}  {row.mean_ms:9.3f}  {row.p95_ms:8.3f}")
    print()

    by_size: dict[int, dict[str, TimingRow]] = {}
    for row in rows:
        if row.section == "mask":
            by_size.setdefault(row.size, {})[row.engine] = row
    print("evaluate overhead over jnp_direct")
    for size in sizes:
        table = by_size.get(size, {})
        direct = table.get("jnp_direct")
        lazy_row = table.get("evaluate")
        if direct is None or lazy_row is None or direct.mean_ms == 0:
            continue
        print(f"n={size:8d}: {lazy_row.mean_ms / direct.mean_ms:8.3f}x")

    if args.json_out:
        outpath = Path(args.json_out)
        outpath.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "timestamp_utc": datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ"),
            "sizes": sizes,
            "samples": args.samples,
            "rows": [asdict(row) for row in rows],
        }
        outpath.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        print(f"Wrote JSON: {outpath}")


if __name__ == "__main__":
    main()
