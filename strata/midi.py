import logging
import typing

import mido

import strata.constants
import strata.scheduler

from strata.hap import Hap


logger = logging.getLogger(__name__)


def open_output_device (device_name: typing.Optional[str] = None) -> typing.Tuple[typing.Optional[str], typing.Optional[typing.Any]]:

	"""
	Open a MIDI output device.

	If ``device_name`` is given, opens that device. Otherwise uses the first
	available device, logging the choice when there are several. No devices
	(or a device that cannot be found or opened) logs an error.

	Returns:
		A tuple of (device_name, midi_out_object), or (None, None) on failure.
	"""

	try:
		outputs = mido.get_output_names()
		logger.info(f"Available MIDI outputs: {outputs}")

		if not outputs:
			logger.error("No MIDI output devices found.")
			return None, None

		if device_name is not None:
			if device_name not in outputs:
				logger.error(f"MIDI output device '{device_name}' not found. Available devices: {outputs}")
				return None, None
			selected_name = device_name

		else:
			selected_name = outputs[0]
			if len(outputs) > 1:
				logger.info(f"Several MIDI outputs found - using '{selected_name}'. Pass a device name to choose another.")

		midi_out = mido.open_output(selected_name)
		logger.info(f"Opened MIDI output: {selected_name}")
		return selected_name, midi_out

	except Exception as e:
		logger.error(f"Failed to open MIDI output: {e}")
		return None, None


class MidiSink (strata.scheduler.Sink):

	"""
	Play events as MIDI notes.

	Each event with an onset becomes a note on at its deadline and a note off
	``duration`` seconds later. Controls are read from dict values:

	- ``note`` (or ``n``): MIDI note number; a plain numeric value is also used
	  as the note. Anything else plays ``DEFAULT_MIDI_NOTE``.
	- ``velocity``: 0-127; otherwise ``gain`` scales ``DEFAULT_MIDI_VELOCITY``.
	- ``channel``: 0-15; otherwise the sink's channel.
	"""

	def __init__ (self, device_name: typing.Optional[str] = None, channel: int = 0, midi_out: typing.Optional[typing.Any] = None) -> None:

		"""Create the sink, opening ``device_name`` unless an open ``midi_out`` port is passed in."""

		super().__init__()

		if not 0 <= channel <= 15:
			raise ValueError(f"MIDI channel must be between 0 and 15, got {channel}")

		self.channel = channel

		if midi_out is not None:
			self.device_name = device_name
			self.midi_out = midi_out
		else:
			self.device_name, self.midi_out = open_output_device(device_name)


	def trigger (self, hap: Hap, deadline: float, duration: float, cps: float) -> None:

		note, velocity, channel = self.note_for(hap.value)

		self._schedule(deadline, mido.Message("note_on", channel=channel, note=note, velocity=velocity))
		self._schedule(deadline + duration, mido.Message("note_off", channel=channel, note=note, velocity=0))


	def note_for (self, value: typing.Any) -> typing.Tuple[int, int, int]:

		"""Work out (note, velocity, channel) for one event value."""

		controls = value if isinstance(value, dict) else {"value": value}

		note = controls.get("note", controls.get("n", controls.get("value")))

		if isinstance(note, bool) or not isinstance(note, (int, float)):
			note = strata.constants.DEFAULT_MIDI_NOTE

		if "velocity" in controls:
			velocity = controls["velocity"]
		else:
			velocity = strata.constants.DEFAULT_MIDI_VELOCITY * controls.get("gain", 1)

		channel = controls.get("channel", self.channel)

		return _clamp_7bit(note), _clamp_7bit(velocity), max(0, min(15, int(channel)))


	def _send (self, payload: mido.Message) -> None:

		if self.midi_out:

			try:
				self.midi_out.send(payload)

			except Exception:
				logger.exception("MIDI send failed (device may be disconnected)")


	def close (self) -> None:

		"""Send any pending note offs so nothing hangs, then close the port."""

		for _, _, message in sorted(self._queue):
			if message.type == "note_off":
				self._send(message)

		super().close()

		if self.midi_out:
			self.midi_out.close()
			self.midi_out = None


def _clamp_7bit (value: float) -> int:
	return max(0, min(127, int(round(value))))
