"""Builds the collaborators a CLI invocation needs from configuration."""

from dataclasses import dataclass
from pathlib import Path

from streamlauncher.broadcast.controller import LifecycleController
from streamlauncher.broadcast.platform import BroadcastPlatform
from streamlauncher.config.logging import setup_logging
from streamlauncher.config.manager import ConfigManager
from streamlauncher.config.schema import LauncherConfig
from streamlauncher.handoff import HandoffStore
from streamlauncher.orchestrator import ProgressCallback, StreamOrchestrator
from streamlauncher.timing.geo import Geocoder, SunTimesProvider
from streamlauncher.timing.resolver import TimeResolver
from streamlauncher.waiting.countdown import Countdown
from streamlauncher.waiting.tasks import DeferredTaskRegistry, get_task_registry


@dataclass
class AppContext:
    """Configuration loaded once per invocation."""

    manager: ConfigManager
    config: LauncherConfig
    config_dir: Path | None = None


def load_context(config_dir: Path | None = None) -> AppContext:
    """Load configuration from ``config_dir`` (default: user config dir).

    Raises:
        InvalidConfigError: If the config file is invalid
    """
    manager = ConfigManager(config_dir)
    return AppContext(manager=manager, config=manager.load_config(), config_dir=config_dir)


def build_resolver(config: LauncherConfig) -> TimeResolver:
    return TimeResolver(
        geocoder=Geocoder(config.geo),
        sun_provider=SunTimesProvider(config.geo),
    )


def build_platform(app: AppContext, interactive: bool = True) -> BroadcastPlatform:
    """Authorize and connect to the YouTube Data API.

    Raises:
        AuthenticationError: If no valid credentials can be obtained
    """
    # Imported here so commands that never reach the platform skip the API client
    from streamlauncher.broadcast.auth import build_youtube_service, load_credentials
    from streamlauncher.broadcast.youtube import YouTubePlatform

    credentials = load_credentials(
        app.manager.credentials_dir(app.config), interactive=interactive
    )
    return YouTubePlatform(build_youtube_service(credentials))


def build_task_registry() -> DeferredTaskRegistry:
    return get_task_registry()


def build_orchestrator(
    app: AppContext,
    interactive: bool = True,
    countdown: Countdown | None = None,
    progress_callback: ProgressCallback | None = None,
) -> StreamOrchestrator:
    """Wire a StreamOrchestrator for one invocation.

    The platform connection is deferred until the orchestrator first needs
    it, so local errors such as a malformed time surface before any
    authorization prompt.
    """
    config = app.config
    return StreamOrchestrator(
        config=config,
        resolver=build_resolver(config),
        controller_factory=lambda: LifecycleController.from_config(
            build_platform(app, interactive=interactive), config
        ),
        handoff=HandoffStore(app.manager.handoff_path(config)),
        registry=build_task_registry(),
        countdown=countdown,
        config_dir=app.config_dir,
        progress_callback=progress_callback,
    )


def context_from_cli(obj: dict | None) -> AppContext:
    """Load the context for the options stored on the Typer context object.

    Logging is reconfigured with the configured ``log_level``; ``--verbose``
    still forces DEBUG.
    """
    obj = obj or {}
    app = load_context(obj.get("config_dir"))
    setup_logging(app.config.log_level, verbose=obj.get("verbose", False), log_file=obj.get("log_file"))
    return app
