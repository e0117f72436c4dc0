"""Stream workflow orchestration.

Sequences time resolution, the broadcast lifecycle, the local broadcasting
software and the wait for the activation time:

- schedule: resolve start/end -> create and bind broadcast -> save the
  identifier -> register detached start and end tasks
- schedule and wait: resolve start -> create and bind broadcast -> save the
  identifier -> count down in-process -> go live
- start: load identifier -> launch OBS (best effort) -> warm-up pause -> go live
- end: load identifier -> end the broadcast
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from streamlauncher.broadcast.controller import LifecycleController
from streamlauncher.broadcast.models import (
    Broadcast,
    BroadcastSpec,
    BroadcastState,
    IngestEndpoint,
    Privacy,
)
from streamlauncher.config.schema import LauncherConfig
from streamlauncher.handoff import HandoffStore
from streamlauncher.obs import LaunchResult, ProcessLauncher, default_obs_path
from streamlauncher.timing.models import ResolvedTime, ScheduleWindow
from streamlauncher.timing.resolver import TimeResolver
from streamlauncher.utils.datetime import now_local
from streamlauncher.utils.errors import BroadcastCreateError
from streamlauncher.waiting.countdown import Countdown
from streamlauncher.waiting.tasks import DeferredTaskRegistry, build_program_command

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, dict[str, Any]], None]


@dataclass
class ScheduleOptions:
    """Options for scheduling a broadcast (CLI flags merged with config)."""

    time: str
    city: str | None = None
    start_offset: int = 0
    end_offset: int = 0
    title: str | None = None
    description: str = ""
    privacy: Privacy = Privacy.PUBLIC


@dataclass
class ScheduleResult:
    """Outcome of a schedule run."""

    broadcast: Broadcast
    endpoint: IngestEndpoint
    start: ResolvedTime
    end: ResolvedTime | None = None
    window: ScheduleWindow | None = None
    handoff_saved: bool = False
    tasks: dict[str, datetime] = field(default_factory=dict)


class StreamOrchestrator:
    """Runs the schedule, start and end flows."""

    def __init__(
        self,
        config: LauncherConfig,
        resolver: TimeResolver,
        controller_factory: Callable[[], LifecycleController],
        handoff: HandoffStore,
        registry: DeferredTaskRegistry | None = None,
        launcher: ProcessLauncher | None = None,
        countdown: Countdown | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] = now_local,
        config_dir: Path | None = None,
        progress_callback: ProgressCallback | None = None,
    ):
        """Initialize the orchestrator.

        Args:
            config: Effective configuration
            resolver: Time resolver
            controller_factory: Builds the lifecycle controller. Called only
                when the platform is needed, so authorization happens after
                local validation.
            handoff: Broadcast-identifier handoff store
            registry: OS task registry (detached mode)
            launcher: Local process launcher
            countdown: In-process countdown (attached mode)
            sleep: Sleep function for the OBS warm-up pause
            clock: Current local time (default title date)
            config_dir: Custom config directory, passed on to detached tasks
            progress_callback: Receives (step_name, step_data) as the flow advances
        """
        self.config = config
        self.resolver = resolver
        self.handoff = handoff
        self.registry = registry
        self.launcher = launcher or ProcessLauncher()
        self.countdown = countdown or Countdown(tick_seconds=config.timing.countdown_tick_seconds)
        self.config_dir = config_dir
        self._controller_factory = controller_factory
        self._controller: LifecycleController | None = None
        self._sleep = sleep
        self._clock = clock
        self._progress = progress_callback

    @property
    def controller(self) -> LifecycleController:
        if self._controller is None:
            self._controller = self._controller_factory()
        return self._controller

    def _emit(self, step: str, **data: Any) -> None:
        if self._progress is not None:
            self._progress(step, data)

    def _build_spec(self, options: ScheduleOptions, start: datetime) -> BroadcastSpec:
        try:
            return BroadcastSpec.with_default_title(
                options.title,
                self.config.broadcast.title_template,
                self._clock(),
                description=options.description,
                privacy=options.privacy,
                scheduled_start=start,
            )
        except ValidationError as e:
            reasons = "; ".join(error["msg"] for error in e.errors())
            raise BroadcastCreateError(f"Invalid broadcast settings: {reasons}") from e

    def _save_handoff(self, broadcast_id: str) -> bool:
        try:
            self.handoff.write(broadcast_id)
        except OSError as e:
            logger.warning(f"Could not save broadcast ID to {self.handoff.path}: {e}")
            self._emit("handoff_failed", path=self.handoff.path, error=str(e))
            return False
        self._emit("handoff_saved", path=self.handoff.path)
        return True

    def _create(self, options: ScheduleOptions, start: datetime) -> tuple[Broadcast, IngestEndpoint]:
        spec = self._build_spec(options, start)
        self._emit("spec_ready", spec=spec)
        broadcast, endpoint = self.controller.schedule_stream(spec)
        self._emit("broadcast_scheduled", broadcast=broadcast, endpoint=endpoint)
        return broadcast, endpoint

    def schedule(self, options: ScheduleOptions) -> ScheduleResult:
        """Create the broadcast and register detached start and end tasks.

        Raises:
            LauncherError: Any step failed (see the individual components)
        """
        if self.registry is None:
            raise ValueError("Detached scheduling needs a task registry")

        window = self.resolver.resolve_window(
            options.time, options.city, options.start_offset, options.end_offset
        )
        self._emit("window_resolved", window=window)

        broadcast, endpoint = self._create(options, window.start.timestamp)
        saved = self._save_handoff(broadcast.id)

        tasks: dict[str, datetime] = {}
        for action, name, when in (
            ("start", self.config.tasks.start_task_name, window.start.timestamp),
            ("end", self.config.tasks.end_task_name, window.end.timestamp),
        ):
            command = build_program_command(action, broadcast.id, self.config_dir)
            self.registry.upsert(name, command, when)
            tasks[name] = when
            self._emit("task_registered", name=name, action=action, when=when)

        return ScheduleResult(
            broadcast=broadcast,
            endpoint=endpoint,
            start=window.start,
            end=window.end,
            window=window,
            handoff_saved=saved,
            tasks=tasks,
        )

    def schedule_and_wait(self, options: ScheduleOptions) -> ScheduleResult:
        """Create the broadcast, then wait in-process and go live.

        A start time in the past goes live immediately.
        """
        start = self.resolver.resolve(options.time, options.city, options.start_offset)
        self._emit("start_resolved", start=start)

        broadcast, endpoint = self._create(options, start.timestamp)
        saved = self._save_handoff(broadcast.id)

        self._emit("waiting", until=start.timestamp)
        self.countdown.run(start.timestamp, lambda: self.controller.go_live(broadcast.id))
        self._emit("live", broadcast_id=broadcast.id)

        return ScheduleResult(
            broadcast=broadcast.model_copy(update={"state": BroadcastState.LIVE}),
            endpoint=endpoint,
            start=start,
            handoff_saved=saved,
        )

    def launch_obs(self, obs_path: Path | None = None) -> LaunchResult:
        """Start OBS; a failure is reported, never raised."""
        path = obs_path or self.config.obs.path or default_obs_path()
        result = self.launcher.start(path, self.config.obs.args)
        if result.started:
            logger.info(f"OBS started with streaming enabled ({path})")
            self._emit("obs_started", path=path, pid=result.pid)
        else:
            logger.warning(f"Error starting OBS at {path}: {result.error}")
            self._emit("obs_failed", path=path, error=result.error)
        return result

    def start(
        self,
        broadcast_id: str | None = None,
        obs_path: Path | None = None,
        skip_launch: bool | None = None,
    ) -> str:
        """Launch OBS and take the broadcast live.

        Returns:
            The broadcast identifier that went live

        Raises:
            HandoffReadError: No identifier given or stored
            GoLiveError: The live transition failed
        """
        bid = self.handoff.resolve(broadcast_id)
        self._emit("broadcast_selected", broadcast_id=bid)

        if skip_launch is None:
            skip_launch = self.config.obs.skip_launch
        if not skip_launch:
            result = self.launch_obs(obs_path)
            # Discarded on failure: the operator may start OBS by hand
            if result.started:
                self._emit("obs_warmup", seconds=self.config.timing.obs_warmup_seconds)
                self._sleep(self.config.timing.obs_warmup_seconds)

        self.controller.go_live(bid)
        self._emit("live", broadcast_id=bid)
        return bid

    def end(self, broadcast_id: str | None = None) -> str:
        """End the broadcast.

        Raises:
            HandoffReadError: No identifier given or stored
            EndStreamError: The transition failed
        """
        bid = self.handoff.resolve(broadcast_id)
        self._emit("broadcast_selected", broadcast_id=bid)
        self.controller.end_stream(bid)
        self._emit("ended", broadcast_id=bid)
        return bid

    def status(self, broadcast_id: str | None = None) -> tuple[str, BroadcastState | None]:
        """Probe the remote state of the broadcast."""
        bid = self.handoff.resolve(broadcast_id)
        return bid, self.controller.probe_state(bid)

    def cancel(self) -> list[str]:
        """Remove the detached start and end tasks.

        Returns:
            Names of the tasks that were removed
        """
        if self.registry is None:
            raise ValueError("Cancelling needs a task registry")
        removed = []
        for name in (self.config.tasks.start_task_name, self.config.tasks.end_task_name):
            if self.registry.remove(name):
                removed.append(name)
        return removed
