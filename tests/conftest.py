import typing

import mido
import pytest

import strata.hap
import strata.scheduler


class FakeMidiOut:

	"""Minimal MIDI output stub for tests that records what it is sent."""

	def __init__ (self) -> None:

		self.sent: typing.List[mido.Message] = []
		self.closed = False


	def send (self, message: mido.Message) -> None:

		"""Record an outgoing MIDI message."""

		self.sent.append(message)


	def close (self) -> None:

		"""Mark the fake device closed."""

		self.closed = True


class FakeOscClient:

	"""Stands in for pythonosc's SimpleUDPClient and records each bundle it is sent."""

	def __init__ (self) -> None:

		self.bundles: typing.List[typing.Any] = []


	def send (self, content: typing.Any) -> None:

		self.bundles.append(content)


	@property
	def messages (self) -> typing.List[typing.Tuple[float, str, typing.List[typing.Any]]]:

		"""(time tag, address, arguments) for every message received so far."""

		return [(bundle.timestamp, message.address, message.params) for bundle in self.bundles for message in bundle]


class RecordingSink (strata.scheduler.Sink):

	"""A sink that remembers every trigger instead of sending anything."""

	def __init__ (self) -> None:

		super().__init__()
		self.events: typing.List[typing.Tuple[strata.hap.Hap, float, float, float]] = []
		self.closed = False


	def trigger (self, hap: strata.hap.Hap, deadline: float, duration: float, cps: float) -> None:

		self.events.append((hap, deadline, duration, cps))


	def close (self) -> None:

		super().close()
		self.closed = True


# Module-level reference so tests can inspect the most recently opened FakeMidiOut.
_current_fake_output: typing.Optional[FakeMidiOut] = None


def _fake_get_output_names () -> typing.List[str]:

	"""Return a fixed list of MIDI output names for tests."""

	return ["Dummy MIDI"]


def _fake_open_output (name: str) -> FakeMidiOut:

	"""Return a fake MIDI output regardless of the name."""

	global _current_fake_output
	fake = FakeMidiOut()
	_current_fake_output = fake
	return fake


@pytest.fixture
def patch_midi (monkeypatch: pytest.MonkeyPatch) -> None:

	"""Patch mido to use a fake MIDI output for all tests that need it."""

	monkeypatch.setattr(mido, "get_output_names", _fake_get_output_names)
	monkeypatch.setattr(mido, "open_output", _fake_open_output)


@pytest.fixture
def fake_midi_out () -> FakeMidiOut:

	"""A recording MIDI port to hand straight to a sink."""

	return FakeMidiOut()


@pytest.fixture
def osc_client () -> FakeOscClient:

	"""A recording OSC client."""

	return FakeOscClient()


@pytest.fixture
def recording_sink () -> RecordingSink:

	"""A sink that records every scheduled event."""

	return RecordingSink()
