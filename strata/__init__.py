"""
Strata - a pattern algebra for live-coded music in Python.

A pattern is a function of time. Ask it what happens between two points in
cyclic time and it answers with the events sounding there, each carrying a
value: a sample name, a note, a dict of synth controls. Patterns are built
from a handful of leaves and combined with sequencing, layering, time
transforms and deterministic randomness, so the same query always gives
the same answer. A real-time scheduler turns the answers into OSC or MIDI.

What makes it different:

- **Exact time.** Every time value is a ``fractions.Fraction``. A pattern
  sped up by three and slowed down by three is exactly the original, and a
  performance that runs for hours never drifts.
- **Fractal and chaotic generators.** Cantor, Sierpinski and dragon-curve
  rhythms, L-systems, elementary cellular automata, Barnsley ferns and
  other iterated function systems, logistic and Henon maps, Julia and
  Mandelbrot escape times, all as plain sequences or ready-made patterns.
- **Noise.** Perlin noise, fractal Brownian motion, turbulence and ridge
  noise as functions and as continuous patterns.
- **Morphing.** Crossfade, filter-sweep or density-morph one pattern into
  another along named tension curves (``arc``, ``cliff``, ``wave``,
  ``golden``, ``pulse``, ``lorenz``), or let a rhythm grow with a cellular
  automaton seeded from itself.
- **Mini-notation.** ``"bd [sd, hh] <cp [cp cp]> bd(3,8)"`` compiles into
  an ordinary pattern.

Modules:

- ``strata.pattern``: the Pattern type, leaves, combinators and signals.
- ``strata.rational``, ``strata.timespan``, ``strata.hap``: time and events.
- ``strata.fractals``, ``strata.noise``, ``strata.sequence_utils``: generators.
- ``strata.tension``, ``strata.morph``: morphing.
- ``strata.mini_notation``: the mini-notation compiler.
- ``strata.scheduler``, ``strata.osc``, ``strata.midi``: real-time output.

Minimal example:

    ```python
    import asyncio
    import strata
    import strata.osc

    beat = strata.stack(
        strata.s(strata.compile("bd(3,8)")),
        strata.s(strata.compile("hh*8")).degrade_by(0.3),
    )

    scheduler = strata.Scheduler(beat, strata.osc.OscSink(), cps=0.5)
    asyncio.run(scheduler.play())
    ```

Package-level exports: ``Pattern``, ``TimeSpan``, ``Hap``, ``Time``,
``pure``, ``silence``, ``signal``, ``stack``, ``fastcat``, ``slowcat``,
``timecat``, ``polymeter``, ``euclid``, ``s``, ``note``, ``compile``,
``Scheduler``.
"""

import strata.hap
import strata.mini_notation
import strata.pattern
import strata.rational
import strata.scheduler
import strata.timespan


Pattern = strata.pattern.Pattern
TimeSpan = strata.timespan.TimeSpan
Hap = strata.hap.Hap
Time = strata.rational.Time

pure = strata.pattern.pure
silence = strata.pattern.silence
signal = strata.pattern.signal
stack = strata.pattern.stack
fastcat = strata.pattern.fastcat
slowcat = strata.pattern.slowcat
timecat = strata.pattern.timecat
polymeter = strata.pattern.polymeter
euclid = strata.pattern.euclid
s = strata.pattern.s
note = strata.pattern.note

compile = strata.mini_notation.compile

Scheduler = strata.scheduler.Scheduler
