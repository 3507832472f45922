"""
Recording lifecycle controller.

    IDLE -> STARTING -> RECORDING <-> PAUSED -> STOPPING -> IDLE

A start resolves the recording template and hands the session to a
worker thread, which counts down, launches the command and discovers
the capture process. Every state change happens under the controller
lock, and signals are only ever sent to a discovered pid.

Example:
    controller = RecordingController(LocalTransport(), load_config(),
                                     window_provider=StaticWindowIdProvider("21"))
    session = controller.start("/tmp/out.ogv")
    controller.wait_until_started(timeout=15)
    controller.toggle_pause()
    controller.toggle_pause()
    controller.stop()
"""

import threading
from concurrent.futures import Future
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, Optional

from camcorder.config import Config
from camcorder.core.context import build_context, discard_temp_paths, format_window_id
from camcorder.core.errors import (
    ConfigError,
    DiscoveryCancelled,
    InvalidTransition,
    ProcessNotFound,
    ProcessNotRunning,
    SessionAlreadyActive,
    StartingInProgress,
    UnresolvedPlaceholder,
)
from camcorder.core.template import ResolutionContext
from camcorder.host import TeardownNotifier, WindowIdProvider
from camcorder.logging import get_camcorder_logger
from camcorder.process.discovery import ProcessDiscovery
from camcorder.transport.base import SignalKind, Transport

logger = get_camcorder_logger(__name__)


class SessionState(Enum):
    """Lifecycle states of a recording session."""
    IDLE = "idle"
    STARTING = "starting"
    RECORDING = "recording"
    PAUSED = "paused"
    STOPPING = "stopping"


BUSY_STATES = (SessionState.STARTING, SessionState.RECORDING,
               SessionState.PAUSED, SessionState.STOPPING)


@dataclass
class RecordingSession:
    """
    One recording attempt, from start request to stop completion.

    `ready` resolves to the capture pid once recording begins, or to the
    error that sent the session back to IDLE.
    """
    output_file: str
    command: str
    command_name: str
    window_id: Optional[str] = None
    resolved_window_id: Optional[str] = None
    state: SessionState = SessionState.STARTING
    pid: Optional[int] = None
    spawned_pid: Optional[int] = None
    started_at: datetime = field(default_factory=datetime.now)
    stopped_at: Optional[datetime] = None
    stop_requested: bool = False
    error: Optional[Exception] = None
    ready: Future = field(default_factory=Future, repr=False, compare=False)
    cancel_event: threading.Event = field(default_factory=threading.Event, repr=False, compare=False)
    context: ResolutionContext = field(default_factory=dict, repr=False, compare=False)

    @property
    def active(self) -> bool:
        return self.state in BUSY_STATES

    def matches_window(self, window_id: str) -> bool:
        return window_id in (self.window_id, self.resolved_window_id)


class RecordingController:
    """
    Owns at most one RecordingSession and drives it through its states.

    Structural errors (SessionAlreadyActive, StartingInProgress,
    InvalidTransition, UnresolvedPlaceholder, InvalidWindowId) raise before
    anything is launched or signalled. A start abandoned after launch
    terminates the launched command. Environmental ones (ProcessNotFound,
    ProcessNotRunning) are logged, stored in `last_error` and leave the
    controller idle or unchanged.
    """

    def __init__(
        self,
        transport: Transport,
        config: Optional[Config] = None,
        window_provider: Optional[WindowIdProvider] = None,
        discovery: Optional[ProcessDiscovery] = None,
        announce: Optional[Callable[[int], None]] = None,
        background: bool = True,
    ):
        """
        Args:
            transport: Launches, signals and lists processes
            config: Templates and timings (default: Config())
            window_provider: Source of the window id to capture
            discovery: Process discovery (default: built from config timings)
            announce: Called with the seconds left during the countdown
            background: Run countdown/launch/discovery on a worker thread.
                        False blocks start() until the session settles.
        """
        self.transport = transport
        self.config = config or Config()
        self.window_provider = window_provider
        self.discovery = discovery or ProcessDiscovery(
            transport,
            timeout=self.config.discovery_timeout,
            interval=self.config.discovery_interval,
        )
        self.announce = announce or logger.countdown
        self.background = background
        self.last_error: Optional[Exception] = None
        self._session: Optional[RecordingSession] = None
        self._worker: Optional[threading.Thread] = None
        self._lock = threading.RLock()

    @property
    def session(self) -> Optional[RecordingSession]:
        return self._session

    @property
    def state(self) -> SessionState:
        session = self._session
        return session.state if session else SessionState.IDLE

    def _transition(self, session: RecordingSession, new_state: SessionState,
                    details: Optional[str] = None) -> None:
        old_state = session.state
        session.state = new_state
        logger.transition(old_state.value, new_state.value, details)

    def _resolve(self, output_file: str, window_id: Optional[str]):
        template = self.config.recording_template
        context = build_context(
            template.placeholders,
            output_file=output_file,
            window_id=window_id,
            window_id_offset=self.config.window_id_offset,
        )
        try:
            return template.resolve(context), context
        except UnresolvedPlaceholder:
            discard_temp_paths(context)
            raise

    def _current_window_id(self, window_id) -> Optional[str]:
        if window_id is not None:
            return str(window_id)
        if self.window_provider is not None:
            return self.window_provider.current_window_id()
        return None

    def preview(self, output_file: Optional[str] = None, window_id=None) -> str:
        """Resolve the recording command without launching anything."""
        output_file = output_file or self.config.default_output_file()
        command, context = self._resolve(output_file, self._current_window_id(window_id))
        discard_temp_paths(context)
        return command

    def start(self, output_file: Optional[str] = None, window_id=None) -> RecordingSession:
        """
        Start a new recording session.

        Args:
            output_file: Where the capture is written (default: timestamped
                         file in config.output_directory)
            window_id: Raw window id; asked from window_provider if None

        Returns:
            The new session, in STARTING (background) or its settled
            state (background=False)

        Raises:
            SessionAlreadyActive: Another session has not finished
            UnresolvedPlaceholder: The recording template needs a value
                                   that is not available
            InvalidWindowId: The window id is not a usable integer
        """
        with self._lock:
            if self._session is not None and self._session.active:
                raise SessionAlreadyActive(self._session.state)

            template = self.config.recording_template
            if not template.command_name:
                raise ConfigError("Recording template must start with the command to run")

            output_file = output_file or self.config.default_output_file()
            raw_window_id = self._current_window_id(window_id)
            command, context = self._resolve(output_file, raw_window_id)

            session = RecordingSession(
                output_file=output_file,
                command=command,
                command_name=template.command_name,
                window_id=raw_window_id,
                resolved_window_id=(
                    format_window_id(raw_window_id, self.config.window_id_offset)
                    if raw_window_id is not None else None
                ),
                context=context,
            )
            self._session = session
            self.last_error = None
            logger.transition(SessionState.IDLE.value, SessionState.STARTING.value, output_file)

            if self.background:
                self._worker = threading.Thread(
                    target=self._run, args=(session,), name="camcorder-start", daemon=True
                )
                self._worker.start()

        if not self.background:
            self._run(session)
        return session

    def _countdown(self, session: RecordingSession) -> bool:
        """Announce the start; False if cancelled meanwhile."""
        for remaining in range(self.config.countdown, 0, -1):
            self.announce(remaining)
            if session.cancel_event.wait(1.0):
                return False
        return not session.cancel_event.is_set()

    def _run(self, session: RecordingSession) -> None:
        """Countdown, launch and discovery for one session."""
        exclude = set()
        try:
            if not self._countdown(session):
                self._abort(session, DiscoveryCancelled("Recording cancelled before launch"))
                return

            exclude = self.discovery.snapshot(session.command_name)
            with self._lock:
                if session.stop_requested:
                    self._abort(session, DiscoveryCancelled("Recording cancelled before launch"))
                    return
                logger.command("record", session.command)
                session.spawned_pid = self.transport.run_async(session.command)

            try:
                pid = self.discovery.find(
                    session.command_name,
                    root=session.spawned_pid,
                    exclude=exclude,
                    cancel_event=session.cancel_event,
                )
            except DiscoveryCancelled as e:
                self._terminate_unclaimed(session, exclude)
                self._abort(session, e)
                return
            except ProcessNotFound as e:
                logger.warning(str(e))
                self.last_error = e
                self._terminate_unclaimed(session, exclude)
                self._abort(session, e)
                return

            with self._lock:
                session.pid = pid
                if session.stop_requested:
                    self._terminate(session)
                    self._finish(session)
                    session.ready.set_result(pid)
                    return
                self._transition(session, SessionState.RECORDING, f"pid {pid}")
                session.ready.set_result(pid)
        except Exception as e:
            logger.error(f"Could not start recording: {e}")
            self.last_error = e
            if session.spawned_pid is not None and session.pid is None:
                self._terminate_spawned(session)
            self._abort(session, e)

    def _terminate_unclaimed(self, session: RecordingSession, exclude) -> None:
        """Stop a launched process that discovery never handed over."""
        pid = self.discovery.poll_once(
            session.command_name, root=session.spawned_pid, exclude=exclude
        )
        target = pid if pid is not None else session.spawned_pid
        if target is not None:
            self.transport.send_signal(target, SignalKind.TERMINATE)

    def _terminate_spawned(self, session: RecordingSession) -> None:
        """Best-effort stop of the launched command after an unexpected failure."""
        try:
            self.transport.send_signal(session.spawned_pid, SignalKind.TERMINATE)
        except Exception as e:
            logger.warning(f"Could not terminate process {session.spawned_pid}: {e}")

    def _abort(self, session: RecordingSession, error: Exception) -> None:
        with self._lock:
            session.error = error
            self._finish(session)
            discard_temp_paths(session.context)
            if not session.ready.done():
                session.ready.set_exception(error)

    def _finish(self, session: RecordingSession) -> None:
        """Release the session and return to IDLE."""
        session.pid = None
        session.stopped_at = datetime.now()
        self._transition(session, SessionState.IDLE)
        if self._session is session:
            self._session = None

    def _terminate(self, session: RecordingSession) -> bool:
        delivered = False
        if session.pid is not None:
            delivered = self.transport.send_signal(session.pid, SignalKind.TERMINATE)
        if not delivered:
            error = ProcessNotRunning(session.pid)
            self.last_error = error
            logger.warning(f"{error}; releasing session anyway")
        return delivered

    def wait_until_started(self, timeout: Optional[float] = None) -> SessionState:
        """
        Block until the current session leaves STARTING.

        Returns:
            The resulting state (RECORDING, or IDLE if the start failed)
        """
        session = self._session
        if session is None:
            return SessionState.IDLE
        try:
            session.ready.result(timeout)
        except Exception:
            pass
        return session.state if self._session is session else SessionState.IDLE

    def stop(self) -> Optional[RecordingSession]:
        """
        Stop the current session.

        Idempotent: returns None when nothing is running. A stop during
        STARTING cancels the countdown/discovery; the worker then
        terminates whatever was launched and settles in IDLE.
        """
        with self._lock:
            session = self._session
            if session is None or session.state == SessionState.IDLE:
                return None
            if session.state == SessionState.STOPPING:
                return session

            if session.state == SessionState.STARTING:
                session.stop_requested = True
                self._transition(session, SessionState.STOPPING, "stop requested while starting")
                session.cancel_event.set()
                return session

            self._transition(session, SessionState.STOPPING)
            self._terminate(session)
            self._finish(session)
            logger.success(f"Recording saved to {session.output_file}")
            return session

    def _signal_pause_resume(self, session: RecordingSession, new_state: SessionState) -> bool:
        if session.pid is None or not self.transport.send_signal(session.pid, SignalKind.PAUSE_RESUME):
            error = ProcessNotRunning(session.pid)
            self.last_error = error
            logger.warning(str(error))
            return False
        self._transition(session, new_state)
        return True

    def _require(self, action: str, expected: SessionState) -> RecordingSession:
        session = self._session
        state = session.state if session else SessionState.IDLE
        if state == SessionState.STARTING:
            raise StartingInProgress(action)
        if state != expected:
            raise InvalidTransition(state, action)
        return session

    def pause(self) -> bool:
        """
        Pause a recording session.

        Returns:
            False if the capture process is gone (state unchanged)

        Raises:
            StartingInProgress: Capture process not discovered yet
            InvalidTransition: Not recording
        """
        with self._lock:
            session = self._require("pause", SessionState.RECORDING)
            return self._signal_pause_resume(session, SessionState.PAUSED)

    def resume(self) -> bool:
        """Resume a paused session. See pause()."""
        with self._lock:
            session = self._require("resume", SessionState.PAUSED)
            return self._signal_pause_resume(session, SessionState.RECORDING)

    def toggle_pause(self) -> bool:
        """Pause when recording, resume when paused."""
        with self._lock:
            if self.state == SessionState.PAUSED:
                return self.resume()
            return self.pause()

    def window_destroyed(self, window_id: str) -> None:
        """Force-stop the session capturing window_id, if any."""
        with self._lock:
            session = self._session
            if session is None or not session.matches_window(str(window_id)):
                return
            logger.warning(f"Window {window_id} was destroyed; stopping recording")
            self.stop()

    def attach(self, notifier: TeardownNotifier) -> None:
        """Subscribe to window teardown events."""
        notifier.subscribe(self.window_destroyed)

    def detach(self, notifier: TeardownNotifier) -> None:
        notifier.unsubscribe(self.window_destroyed)
