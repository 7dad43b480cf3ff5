import asyncio
import logging
import os
import typing

import yaml

import strata.constants
import strata.mini_notation
import strata.pattern
import strata.scheduler


# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


DEFAULT_PATTERN = "bd(3,8) [~ sd]*2, hh*8?"


def load_config (config_path: str = 'config.yaml') -> dict:

	"""
	Load configuration from a YAML file.
	"""

	if not os.path.exists(config_path):
		logger.warning(f"Config file {config_path} not found. Using defaults.")
		return {}

	with open(config_path, 'r') as f:
		return yaml.safe_load(f) or {}


def build_sink (config: dict) -> strata.scheduler.Sink:

	"""
	OSC output unless the config names a MIDI device.

	```yaml
	cps: 0.5
	pattern: "bd(3,8) [~ sd]*2, hh*8?"
	osc:
	  host: 127.0.0.1
	  port: 57120
	midi:
	  device: "IAC Driver Bus 1"
	```
	"""

	midi_config: typing.Dict[str, typing.Any] = config.get('midi') or {}

	if midi_config.get('device'):
		import strata.midi
		return strata.midi.MidiSink(device_name=midi_config['device'], channel=midi_config.get('channel', 0))

	import strata.osc

	osc_config: typing.Dict[str, typing.Any] = config.get('osc') or {}

	return strata.osc.OscSink(
		host = osc_config.get('host', strata.constants.DEFAULT_OSC_HOST),
		port = osc_config.get('port', strata.constants.DEFAULT_OSC_PORT),
	)


def main () -> None:

	"""
	Main entry point: play the configured pattern until interrupted.
	"""

	logger.info("Strata starting...")

	config = load_config()

	cps = config.get('cps', strata.constants.DEFAULT_CPS)
	pattern = strata.pattern.s(strata.mini_notation.compile(config.get('pattern', DEFAULT_PATTERN)))

	scheduler = strata.scheduler.Scheduler(pattern, build_sink(config), cps=cps)

	try:
		asyncio.run(scheduler.play())
	except KeyboardInterrupt:
		logger.info("Stopping...")


if __name__ == "__main__":
	main()
