"""OSC output for SuperDirt and anything else that speaks its message format.

Each event becomes one message (by default to ``/dirt/play`` on
127.0.0.1:57120) made of alternating name/value arguments:

    /dirt/play  cps 0.5  cycle 3.25  delta 0.25  s "bd"  gain 0.8

``cps``, ``cycle`` and ``delta`` (the event's length in seconds) are always
sent; the rest are the event's controls. Plain values are sent as ``s``, so
a pattern of sample names needs no wrapping.

Messages go out as soon as the scheduler finds them, wrapped in a bundle
whose time tag is the event's deadline on the wall clock. The receiver
plays them at that time, so timing does not depend on when the packet
arrives (as long as the scheduler's latency covers the trip).
"""

import fractions
import logging
import time
import typing

import pythonosc.osc_bundle_builder
import pythonosc.osc_message_builder
import pythonosc.udp_client

import strata.constants
import strata.scheduler

from strata.hap import Hap


logger = logging.getLogger(__name__)


class OscSink (strata.scheduler.Sink):

	"""Send events as time-tagged OSC bundles over UDP."""

	def __init__ (
		self,
		host: str = strata.constants.DEFAULT_OSC_HOST,
		port: int = strata.constants.DEFAULT_OSC_PORT,
		address: str = strata.constants.DEFAULT_OSC_ADDRESS,
		client: typing.Optional[typing.Any] = None,
	) -> None:

		"""Create the sink.

		Parameters:
			host: Receiver host.
			port: Receiver UDP port (SuperDirt listens on 57120).
			address: OSC address for every message.
			client: An object with a ``send(bundle)`` method to use instead of
				opening a UDP client (useful for tests).
		"""

		super().__init__()

		self.address = address
		self._client = client if client is not None else pythonosc.udp_client.SimpleUDPClient(host, port)

		# Wall clock time minus perf_counter time; turns scheduler deadlines into OSC time tags.
		self.clock_offset = time.time() - time.perf_counter()

		logger.info(f"OSC output to {host}:{port}{address}")


	def trigger (self, hap: Hap, deadline: float, duration: float, cps: float) -> None:

		try:
			bundle = self.build_bundle(hap, deadline, duration, cps)
		except Exception as e:
			logger.warning(f"OSC build error for {hap.show()}: {e}")
			return

		self._send(bundle)


	def build_bundle (self, hap: Hap, deadline: float, duration: float, cps: float) -> typing.Any:

		"""Wrap one event's message in a bundle time-tagged with its deadline."""

		message = pythonosc.osc_message_builder.OscMessageBuilder(address=self.address)

		for arg in self.message_args(hap, duration, cps):
			message.add_arg(arg)

		bundle = pythonosc.osc_bundle_builder.OscBundleBuilder(deadline + self.clock_offset)
		bundle.add_content(message.build())

		return bundle.build()


	@staticmethod
	def message_args (hap: Hap, duration: float, cps: float) -> typing.List[typing.Any]:

		"""Build the flat name/value argument list for one event."""

		value = hap.value if isinstance(hap.value, dict) else {"s": hap.value}

		args: typing.List[typing.Any] = ["cps", float(cps), "cycle", float(hap.whole_or_part().begin), "delta", float(duration)]

		for name, item in value.items():
			args.extend([str(name), _osc_value(item)])

		return args


	def _send (self, payload: typing.Any) -> None:

		try:
			self._client.send(payload)
		except Exception as e:
			logger.warning(f"OSC send error: {e}")


def _osc_value (value: typing.Any) -> typing.Any:

	"""Convert a control value to a type python-osc can encode."""

	if isinstance(value, bool) or value is None:
		return int(bool(value))

	if isinstance(value, fractions.Fraction):
		return float(value)

	if isinstance(value, (int, float, str, bytes)):
		return value

	return str(value)
