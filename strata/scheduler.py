import asyncio
import heapq
import itertools
import logging
import time
import typing

import strata.constants
import strata.errors
import strata.mini_notation
import strata.pattern
import strata.rational

from strata.hap import Hap
from strata.rational import Time
from strata.timespan import TimeSpan


logger = logging.getLogger(__name__)


class Sink:

	"""
	Base class for scheduler outputs.

	The scheduler calls :meth:`trigger` once for every event onset it finds,
	a little ahead of time. ``deadline`` is the ``time.perf_counter()`` time
	at which the event should sound and ``duration`` its length in seconds.

	Subclasses either send straight away (when the receiver schedules by
	timestamp) or turn the hap into messages and hand them to
	:meth:`_schedule`. Between ticks the scheduler wakes at :attr:`next_due`
	and calls :meth:`flush`, which sends each message once its time has come.
	"""

	def __init__ (self) -> None:

		self._queue: typing.List[typing.Tuple[float, int, typing.Any]] = []
		self._counter = itertools.count()


	def trigger (self, hap: Hap, deadline: float, duration: float, cps: float) -> None:
		raise NotImplementedError


	def _schedule (self, when: float, payload: typing.Any) -> None:
		heapq.heappush(self._queue, (when, next(self._counter), payload))


	def _send (self, payload: typing.Any) -> None:
		raise NotImplementedError


	def flush (self, now: float) -> int:

		"""Send every queued message due at or before ``now``. Returns the number sent."""

		sent = 0

		while self._queue and self._queue[0][0] <= now:
			_, _, payload = heapq.heappop(self._queue)
			self._send(payload)
			sent += 1

		return sent


	@property
	def pending (self) -> int:
		return len(self._queue)


	@property
	def next_due (self) -> typing.Optional[float]:

		"""The earliest queued send time, or ``None`` when nothing is queued."""

		return self._queue[0][0] if self._queue else None


	def close (self) -> None:

		"""Drop anything still queued."""

		self._queue = []


class CallbackSink (Sink):

	"""
	Pass each event straight to a function as it is scheduled.

	Example:
		```python
		def show (hap, deadline, duration, cps):
			print(hap.show())

		strata.scheduler.Scheduler(pattern, strata.scheduler.CallbackSink(show))
		```
	"""

	def __init__ (self, callback: typing.Callable[[Hap, float, float, float], typing.Any]) -> None:

		super().__init__()
		self.callback = callback


	def trigger (self, hap: Hap, deadline: float, duration: float, cps: float) -> None:
		self.callback(hap, deadline, duration, cps)


class Scheduler:

	"""
	Plays a pattern in real time by querying it a small window at a time.

	Every ``interval`` seconds the scheduler asks the pattern for the next
	``interval * cps`` cycles and passes each event onset it finds to the
	sink, with a deadline ``latency`` seconds after the moment the event's
	cycle position maps to. Continuous haps and fragments without an onset
	are never sent.

	Pattern time maps onto the clock through an anchor: the cycle position at
	which playback (or the last tempo change) started and the clock time it
	started at. Changing the tempo moves the anchor, so the cycle position
	never jumps.
	"""

	def __init__ (
		self,
		pattern: typing.Union[strata.pattern.Pattern, str, None] = None,
		sink: typing.Optional[Sink] = None,
		cps: float = strata.constants.DEFAULT_CPS,
		interval: float = strata.constants.DEFAULT_SCHEDULER_INTERVAL,
		latency: float = strata.constants.DEFAULT_LATENCY,
		spin_wait: bool = True,
	) -> None:

		"""Set up a scheduler (it does not start playing until :meth:`start`).

		Parameters:
			pattern: A pattern, or a mini-notation string to compile. Defaults to silence.
			sink: Where events go. Defaults to a sink that discards them.
			cps: Tempo in cycles per second.
			interval: Seconds between ticks, which is also the length of each query window.
			latency: Seconds added to every deadline so that sinks receive events early.
			spin_wait: When True, sleep to just before each wake-up and busy-wait the
				rest, for tighter timing at the cost of a little CPU. When False, use
				``asyncio.sleep()`` alone.
		"""

		if interval <= 0:
			raise strata.errors.PatternArgumentError(f"Scheduler interval must be positive, got {interval}")

		if latency < 0:
			raise strata.errors.PatternArgumentError(f"Scheduler latency cannot be negative, got {latency}")

		self.pattern = strata.pattern.silence
		self.sink: Sink = sink if sink is not None else CallbackSink(lambda *args: None)
		self.cps = _check_cps(cps)
		self.interval = interval
		self.latency = latency
		self.spin_wait = spin_wait

		self.cycle: Time = Time(0)
		self.running = False
		self.task: typing.Optional[asyncio.Task] = None

		self._anchor_time: typing.Optional[float] = None
		self._anchor_cycle: Time = Time(0)

		if pattern is not None:
			self.set_pattern(pattern)


	def set_pattern (self, pattern: typing.Union[strata.pattern.Pattern, str]) -> None:

		"""Swap in a new pattern; it takes over from the next tick, at the current cycle position."""

		if isinstance(pattern, str):
			pattern = strata.mini_notation.compile(pattern)

		self.pattern = pattern
		logger.info("Pattern updated")


	def hush (self) -> None:

		"""Replace the pattern with silence."""

		self.set_pattern(strata.pattern.silence)


	def set_cps (self, cps: float) -> None:

		"""Change tempo from the current cycle position onwards."""

		cps = _check_cps(cps)

		if self._anchor_time is not None:
			self._anchor_time = self.cycle_time(self.cycle)
			self._anchor_cycle = self.cycle

		self.cps = cps
		logger.info(f"Tempo set to {self.cps:.3f} cps")


	def cycle_time (self, cycle: Time) -> float:

		"""The clock time (``time.perf_counter()`` seconds) at which ``cycle`` plays, before latency."""

		if self._anchor_time is None:
			raise strata.errors.StrataError("Scheduler clock has not started yet")

		return self._anchor_time + float(cycle - self._anchor_cycle) / self.cps


	def tick (self, now: typing.Optional[float] = None) -> typing.List[Hap]:

		"""
		Query and dispatch one window, then flush the sink.

		The first tick (or :meth:`start`) anchors cycle zero to ``now``. A
		pattern that raises while being queried is logged and the window is
		treated as silence; the clock keeps moving and the next window is
		queried as usual.

		Returns the haps that were sent to the sink.
		"""

		if now is None:
			now = time.perf_counter()

		if self._anchor_time is None:
			self._anchor_time = now
			self._anchor_cycle = self.cycle

		span = TimeSpan(self.cycle, self.cycle + strata.rational.to_time(self.interval * self.cps))

		try:
			haps = self.pattern.query(span)
		except Exception:
			logger.exception(f"Pattern query failed for cycles {span.show()}, skipping window")
			haps = []

		dispatched: typing.List[Hap] = []

		for hap in haps:

			if not hap.has_onset():
				continue

			deadline = self.cycle_time(hap.whole.begin) + self.latency
			duration = float(hap.whole.duration) / self.cps

			self.sink.trigger(hap, deadline, duration, self.cps)
			dispatched.append(hap)

		self.cycle = span.end
		self.sink.flush(now)

		return dispatched


	async def start (self) -> None:

		"""Start playback in a separate asyncio task, from the current cycle position."""

		if self.running:
			return

		self._anchor_time = time.perf_counter()
		self._anchor_cycle = self.cycle

		self.running = True
		self.task = asyncio.create_task(self._run_loop())

		logger.info(f"Scheduler started at cycle {self.cycle} ({self.cps:.3f} cps)")


	async def stop (self) -> None:

		"""
		Stop playback and close the sink.
		"""

		if not self.running and self.task is None:
			return

		logger.info("Stopping scheduler...")

		self.running = False

		if self.task:
			# A cancelled play() leaves the loop task already finished.
			if not self.task.done():
				await self.task
			self.task = None

		self.sink.close()
		self._anchor_time = None

		logger.info("Scheduler stopped")


	async def play (self) -> None:

		"""
		Convenience method to start playback and wait until it is stopped or cancelled.
		"""

		await self.start()

		try:
			if self.task:
				await self.task
		except asyncio.CancelledError:
			pass
		finally:
			await self.stop()


	async def _run_loop (self) -> None:

		"""Tick every ``interval`` seconds against a fixed timeline, so lateness never accumulates."""

		next_tick_time = time.perf_counter()

		while self.running:

			self.tick(next_tick_time)

			next_tick_time += self.interval
			await self._send_until(next_tick_time)

			behind = time.perf_counter() - next_tick_time

			if behind > self.interval:
				logger.warning(f"Scheduler is running {behind * 1000:.1f} ms behind")


	async def _send_until (self, until: float) -> None:

		"""Wait for ``until``, waking at each queued message's deadline to send it on time."""

		while self.running:

			due = self.sink.next_due
			wake = until if due is None else min(due, until)

			await self._wait_for(wake)

			if wake >= until:
				return

			self.sink.flush(time.perf_counter())


	async def _wait_for (self, target: float) -> None:

		sleep_time = target - time.perf_counter()

		if sleep_time <= 0:
			# Yield so other tasks still run when the loop is behind.
			await asyncio.sleep(0)
			return

		if self.spin_wait and sleep_time > strata.constants.SPIN_THRESHOLD:
			# Sleep to just short of the target, then busy-wait the last fraction of a millisecond.
			await asyncio.sleep(sleep_time - strata.constants.SPIN_THRESHOLD)
			while time.perf_counter() < target:
				pass
		else:
			await asyncio.sleep(sleep_time)


def _check_cps (cps: float) -> float:

	if cps <= 0:
		raise strata.errors.PatternArgumentError(f"Tempo must be a positive number of cycles per second, got {cps}")

	return float(cps)
