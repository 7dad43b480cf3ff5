"""Library defaults.

Every value here can be overridden with a keyword argument at the call site;
nothing in the engine reads these at query time except as a default.
"""

import math


# Timing

DEFAULT_CPS = 0.5					# cycles per second (one cycle = 2 seconds = one 4/4 bar at 120 BPM)
DEFAULT_SCHEDULER_INTERVAL = 0.05	# seconds of pattern time queried per scheduler tick
DEFAULT_LATENCY = 0.1				# seconds added to each deadline before it reaches a sink
SPIN_THRESHOLD = 0.001				# seconds before a wake-up at which the scheduler stops sleeping and busy-waits

# Randomness

DEFAULT_SEED = 0
MINI_NOTATION_SEED = 1000			# first seed used by "?" steps; must differ from DEFAULT_SEED

# Morphing

DEFAULT_CURVE = "arc"
DEFAULT_MORPH_CYCLES = 4
DEFAULT_EVOLVE_RULE = 30
DEFAULT_EVOLVE_GENERATIONS = 8
EVOLVE_CELLS = 16

FILTER_MIN_HZ = 20.0
FILTER_MAX_HZ = 20000.0

GOLDEN_RATIO = (1 + math.sqrt(5)) / 2

# Lorenz attractor used by the "lorenz" tension curve

LORENZ_SIGMA = 10.0
LORENZ_RHO = 28.0
LORENZ_BETA = 8.0 / 3.0
LORENZ_DT = 0.01
LORENZ_STEPS_PER_UNIT = 100

# Output

DEFAULT_OSC_HOST = "127.0.0.1"
DEFAULT_OSC_PORT = 57120			# SuperDirt
DEFAULT_OSC_ADDRESS = "/dirt/play"
DEFAULT_MIDI_NOTE = 60
DEFAULT_MIDI_VELOCITY = 100
