import asyncio
import logging

import strata
import strata.osc

logging.basicConfig(level=logging.INFO)

# A four-on-the-floor kick, off-beat hats that thin out at random,
# and a snare that alternates between one and two hits per bar.
beat = strata.stack(
	strata.s(strata.compile("bd*4")),
	strata.s(strata.compile("[~ hh]*4")).degrade_by(0.25),
	strata.s(strata.compile("~ <sd [sd sd]>")),
)

if __name__ == "__main__":

	scheduler = strata.Scheduler(beat, strata.osc.OscSink(), cps=0.5)
	asyncio.run(scheduler.play())
