"""Fixed-period asyncio driver around a :class:`GameSession`."""

from __future__ import annotations

import asyncio
import enum
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from grid_snake.session import GameSession, Phase, SessionState, TickResult
from grid_snake.snake import Direction

logger = logging.getLogger(__name__)


class GameEvent(str, enum.Enum):
    """Notifications for renderers, audio and network collaborators."""

    STARTED = "started"
    TICK = "tick"
    FOOD_CONSUMED = "food_consumed"
    COLLIDED = "collided"
    BOARD_FULL = "board_full"
    STOPPED = "stopped"
    RESET = "reset"


@dataclass(frozen=True)
class EventMessage:
    event: GameEvent
    state: SessionState
    result: TickResult | None = None

    def to_dict(self) -> dict:
        return {"event": self.event.value, "state": self.state.to_dict()}


Listener = Callable[[EventMessage], Awaitable[None] | None]


class GameLoop:
    """Runs :meth:`GameSession.tick` every ``tick_interval_ms``.

    At most one driver task exists at a time. Stopping, resetting or a
    terminal tick cancels it; since the session phase changes
    synchronously, a tick that was already due becomes a no-op.
    """

    def __init__(
        self,
        session: GameSession,
        tick_interval_ms: int | None = None,
    ) -> None:
        interval = (
            tick_interval_ms if tick_interval_ms is not None
            else session.config.tick_interval_ms
        )
        if interval <= 0:
            raise ValueError("tick_interval_ms must be positive.")
        self.session = session
        self.tick_interval_ms = interval
        self._listeners: list[Listener] = []
        self._task: asyncio.Task | None = None
        # Cancelled drivers and async listener deliveries still in flight.
        self._pending: set[asyncio.Task] = set()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # -- lifecycle --------------------------------------------------------

    def start(self) -> bool:
        """Start the session and schedule the tick task.

        Must be called from inside a running event loop.
        """
        if self.running:
            return False
        loop = asyncio.get_running_loop()
        self.session.start()
        self._task = loop.create_task(self._run())
        self._notify(GameEvent.STARTED)
        return True

    def stop(self) -> bool:
        """Cancel the tick task and pause the session."""
        self._cancel()
        stopped = self.session.stop()
        if stopped:
            self._notify(GameEvent.STOPPED)
        return stopped

    def reset(
        self,
        rows: int | None = None,
        cols: int | None = None,
        initial_length: int | None = None,
    ) -> SessionState:
        """Cancel the tick task and reset the session without restarting."""
        self._cancel()
        state = self.session.reset(rows, cols, initial_length)
        self._notify(GameEvent.RESET)
        return state

    def set_direction(self, direction: Direction) -> bool:
        return self.session.set_direction(direction)

    async def wait_closed(self) -> None:
        """Wait for the driver, cancelled drivers and listener deliveries."""
        tasks = list(self._pending)
        if self._task is not None:
            tasks.append(self._task)
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def aclose(self) -> None:
        self._cancel()
        await self.wait_closed()

    # -- ticking ----------------------------------------------------------

    async def tick(self) -> TickResult:
        """Run one session tick and deliver the resulting events."""
        result = self.session.tick()
        if not result.moved and not result.collided:
            return result
        events = [GameEvent.TICK]
        if result.food_consumed:
            events.append(GameEvent.FOOD_CONSUMED)
        if result.collided:
            events.append(GameEvent.COLLIDED)
        if result.board_full:
            events.append(GameEvent.BOARD_FULL)
        for event in events:
            await self._deliver(EventMessage(event, result.state, result))
        return result

    async def _run(self) -> None:
        interval = self.tick_interval_ms / 1000.0
        try:
            while self.session.phase is Phase.RUNNING:
                await asyncio.sleep(interval)
                result = await self.tick()
                if result.collided or result.board_full:
                    break
        except asyncio.CancelledError:
            logger.debug("Tick loop cancelled.")
            raise
        except Exception:
            logger.exception("Tick loop error; stopping session.")
            if self.session.stop():
                self._notify(GameEvent.STOPPED)

    def _cancel(self) -> None:
        """Cancel the driver and forget it so a new one can start at once."""
        task = self._task
        self._task = None
        if task is not None and not task.done():
            task.cancel()
            self._track(task)

    def _track(self, task: asyncio.Task) -> None:
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def _notify(self, event: GameEvent) -> None:
        """Deliver a lifecycle event without blocking the caller."""
        message = EventMessage(event, self.session.state())
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        for listener in list(self._listeners):
            try:
                outcome = listener(message)
            except Exception:
                logger.exception("Listener failed on %s.", event.value)
                continue
            if inspect.isawaitable(outcome):
                if loop is None:
                    logger.warning(
                        "Dropped async listener for %s: no running loop.",
                        event.value,
                    )
                    if inspect.iscoroutine(outcome):
                        outcome.close()
                    continue
                self._track(loop.create_task(self._await_listener(outcome, event)))

    async def _deliver(self, message: EventMessage) -> None:
        for listener in list(self._listeners):
            try:
                outcome = listener(message)
                if inspect.isawaitable(outcome):
                    await outcome
            except Exception:
                logger.exception("Listener failed on %s.", message.event.value)

    @staticmethod
    async def _await_listener(outcome: Awaitable[None], event: GameEvent) -> None:
        try:
            await outcome
        except Exception:
            logger.exception("Listener failed on %s.", event.value)
