"""
Strata Demo - fractals, noise and morphing

A generative piece that drifts from a sparse Cantor rhythm into a dense
cellular automaton groove and back over sixteen cycles, while a dragon-curve melody
plays over a Perlin-noise filter sweep.

How to read this file
─────────────────────
1. Output      - MIDI if a device name is given, otherwise SuperDirt over OSC.
2. Drums       - Two rhythms joined with a tension-shaped morph.
3. Melody      - A dragon curve walked as a turtle melody, thinned with degrade.
4. Controls    - Noise and sine signals sampled into per-event controls.
5. Play        - Start the scheduler. Press Ctrl+C to stop.
"""

import asyncio
import logging
import sys

import strata
import strata.fractals
import strata.morph
import strata.noise
import strata.osc
import strata.pattern


logging.basicConfig(level=logging.INFO)


# ─── Output ──────────────────────────────────────────────────────────

MIDI_DEVICE = sys.argv[1] if len(sys.argv) > 1 else None
CPS = 0.55


# ─── Drums ───────────────────────────────────────────────────────────
#
# Cantor dust at depth 2 gives a sparse 9-step rhythm; rule 30 gives a
# busy 16-step one. The "arc" curve peaks half way through the
# sixteen cycles and falls back, so the groove swells and relaxes.

sparse = strata.s("bd").struct(strata.fractals.cantor(2))
busy = strata.s("hh").struct(strata.fractals.cellular_automaton(30, 16))

drums = strata.stack(
	strata.morph.morph(sparse, busy, curve="arc", cycles=16),
	strata.s(strata.compile("~ sd ~ <sd [sd cp]>")),
)


# ─── Melody ──────────────────────────────────────────────────────────

melody = (
	strata.note(strata.fractals.dragon_melody(4, start_pitch=55, interval=3))
	.slow(4)
	.degrade_by(0.2, seed=3)
	.every(4, lambda p: p.rev())
)


# ─── Controls ────────────────────────────────────────────────────────

cutoff = strata.noise.perlin_noise.range(300, 4000).slow(8)
pan = strata.pattern.sine.slow(3)

melody = melody.control("cutoff", cutoff).control("pan", pan)


# ─── Play ────────────────────────────────────────────────────────────

piece = strata.stack(drums, melody)


def make_sink () -> strata.scheduler.Sink:

	if MIDI_DEVICE:
		import strata.midi
		return strata.midi.MidiSink(MIDI_DEVICE, channel=0)

	return strata.osc.OscSink()


if __name__ == "__main__":

	scheduler = strata.Scheduler(piece, make_sink(), cps=CPS)
	asyncio.run(scheduler.play())
