"""Pattern query throughput benchmark.

Builds a layered pattern (mini-notation drums, a fractal melody, a noise
driven control and a morph between two of them) and measures how long it
takes to query it in scheduler-sized windows.

Usage:
    python benchmarks/query_throughput.py [--cycles N] [--window SECONDS] [--cps CPS]

Options:
    --cycles N          Number of cycles to query (default: 64)
    --window SECONDS    Query window length in seconds (default: 0.05)
    --cps CPS           Tempo in cycles per second (default: 0.5)
"""

import argparse
import logging
import statistics
import time

# Suppress library logging during benchmark - we want clean output.
logging.basicConfig(level=logging.ERROR)

import strata.fractals
import strata.mini_notation
import strata.noise
import strata.pattern
import strata.rational
import strata.timespan


def _build_pattern () -> strata.pattern.Pattern:

	drums = strata.pattern.s(strata.mini_notation.compile("bd(3,8) [~ sd]*2, hh*8?, <~ cp>"))
	melody = strata.pattern.note(strata.fractals.dragon_melody(4)).slow(4)
	cutoff = strata.noise.perlin_noise.range(200, 4000).segment(16).as_param("cutoff")
	fern = strata.pattern.note(strata.fractals.barnsley_fern(32, seed=7)).slow(2)

	return strata.pattern.stack(
		drums,
		melody.set(cutoff),
		melody.morph(fern, curve="golden", cycles=8),
	)


def _run_benchmark (cycles: int, window: float, cps: float) -> list[float]:

	pattern = _build_pattern()
	step = strata.rational.to_time(window * cps)
	begin = strata.rational.Time(0)
	end = strata.rational.Time(cycles)

	timings: list[float] = []

	while begin < end:
		span = strata.timespan.TimeSpan(begin, begin + step)
		start = time.perf_counter()
		pattern.query(span)
		timings.append(time.perf_counter() - start)
		begin = span.end

	return timings


def main () -> None:

	parser = argparse.ArgumentParser(description="Measure pattern query throughput.")
	parser.add_argument("--cycles", type=int, default=64, help="Number of cycles to query")
	parser.add_argument("--window", type=float, default=0.05, help="Query window in seconds")
	parser.add_argument("--cps", type=float, default=0.5, help="Cycles per second")
	args = parser.parse_args()

	timings = _run_benchmark(args.cycles, args.window, args.cps)
	micros = [t * 1_000_000 for t in timings]

	print(f"Queries:  {len(micros)}")
	print(f"Mean:     {statistics.mean(micros):.1f} us")
	print(f"Median:   {statistics.median(micros):.1f} us")
	print(f"Max:      {max(micros):.1f} us")
	print(f"Budget:   {args.window * 1_000_000:.0f} us per window")


if __name__ == "__main__":
	main()
