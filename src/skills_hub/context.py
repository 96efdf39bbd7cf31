"""Application context with dependency injection.

The HubContext dataclass holds all dependencies (the SkillsHub facade and the
global config) and is created once at CLI entry point, then threaded through
the commands via Click's context object.
"""

from dataclasses import dataclass
from pathlib import Path

from skills_hub.global_config import FilesystemGlobalConfigOps, GlobalConfig, GlobalConfigOps
from skills_hub.hub import SkillsHub
from skills_hub.ids import IdGenerator
from skills_hub.integrations.clock.real import RealClock
from skills_hub.io.state_store import FilesystemStateStore
from skills_hub.live_config.store.real import FilesystemConfigStore


@dataclass(frozen=True)
class HubContext:
    """Immutable context holding all dependencies for skills-hub commands.

    Attributes:
        hub: Facade over the persisted state, live configs and skill directories
        global_config: Settings loaded from ~/.skills-hub/config.toml
        global_config_ops: Access to the global config file (for `config set`)
        home: Home directory the live tool configs are resolved against
        debug: Debug flag (enables debug logging)
    """

    hub: SkillsHub
    global_config: GlobalConfig
    global_config_ops: GlobalConfigOps
    home: Path
    debug: bool

    @staticmethod
    def for_test(
        hub: SkillsHub | None = None,
        global_config: GlobalConfig | None = None,
        global_config_ops: GlobalConfigOps | None = None,
        home: Path | None = None,
        debug: bool = False,
    ) -> "HubContext":
        """Create test context with optional pre-configured implementations.

        Uses in-memory state, a fake live config store and a fake clock by
        default, so nothing outside ``home`` is touched.

        Args:
            hub: Optional SkillsHub. If None, one is built from fakes.
            global_config: Optional GlobalConfig (defaults relative to home)
            global_config_ops: Optional ops. If None, InMemoryGlobalConfigOps.
            home: Home directory (defaults to Path("/fake/home"))
            debug: Whether to enable debug mode (default False)

        Example:
            >>> ctx = HubContext.for_test(home=tmp_path)
        """
        from skills_hub.global_config import InMemoryGlobalConfigOps
        from skills_hub.integrations.clock.fake import FakeClock
        from skills_hub.io.state_store import InMemoryStateStore
        from skills_hub.live_config.store.fake import FakeConfigStore

        resolved_home = home if home is not None else Path("/fake/home")
        resolved_config = (
            global_config if global_config is not None else GlobalConfig.default(resolved_home)
        )
        resolved_ops: GlobalConfigOps = (
            global_config_ops
            if global_config_ops is not None
            else InMemoryGlobalConfigOps(resolved_config)
        )
        if hub is None:
            clock = FakeClock()
            hub = SkillsHub(
                state_store=InMemoryStateStore(),
                config_store=FakeConfigStore(),
                clock=clock,
                ids=IdGenerator(clock, start=1),
                home=resolved_home,
                lock_timeout_seconds=resolved_config.lock_timeout_seconds,
                snapshot_retention=resolved_config.snapshot_retention,
            )

        return HubContext(
            hub=hub,
            global_config=resolved_config,
            global_config_ops=resolved_ops,
            home=resolved_home,
            debug=debug,
        )


def create_context(*, debug: bool, home: Path | None = None) -> HubContext:
    """Create production context with real implementations.

    This is the canonical factory for creating the application context.
    Called once at CLI entry point.

    Args:
        debug: If True, enable debug mode
        home: Home directory override (defaults to Path.home())

    Returns:
        HubContext backed by the filesystem under ``home``
    """
    resolved_home = home if home is not None else Path.home()
    global_config_ops = FilesystemGlobalConfigOps(resolved_home)
    global_config = global_config_ops.load_or_default(resolved_home)

    clock = RealClock()
    hub = SkillsHub(
        state_store=FilesystemStateStore(global_config.state_path),
        config_store=FilesystemConfigStore(resolved_home),
        clock=clock,
        ids=IdGenerator(clock),
        home=resolved_home,
        lock_timeout_seconds=global_config.lock_timeout_seconds,
        snapshot_retention=global_config.snapshot_retention,
    )

    return HubContext(
        hub=hub,
        global_config=global_config,
        global_config_ops=global_config_ops,
        home=resolved_home,
        debug=debug,
    )
