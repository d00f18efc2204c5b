"""Loading and merging of global and project configuration."""

import logging
import tomllib
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from ..models.config import EffectiveConfig, GlobalConfig, ProjectConfig
from ..services.exceptions import ConfigError, ConfigNotFoundError, ConfigParseError
from ..utils.paths import config_home
from .constants import DEFAULT_GLOBAL_CONFIG, DEFAULT_PROJECT_CONFIG, GLOBAL_CONFIG_NAME, PROJECT_CONFIG_NAME

logger = logging.getLogger(__name__)


def _read_toml(path: Path) -> dict:
    try:
        return tomllib.loads(path.read_text())
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML in {path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigParseError(f"Could not read {path}: {e}") from e


class ConfigResolver:
    """Resolves the effective configuration for one invocation.

    The global configuration is read at most once per resolver and reused for
    every later call, so a single run always sees one consistent view.
    """

    def __init__(self, project_root: Optional[Path] = None, global_dir: Optional[Path] = None):
        self.project_root = project_root or Path.cwd()
        self.global_dir = global_dir or config_home()
        self._global_config: Optional[GlobalConfig] = None

    @property
    def project_config_path(self) -> Path:
        return self.project_root / PROJECT_CONFIG_NAME

    @property
    def global_config_path(self) -> Path:
        return self.global_dir / GLOBAL_CONFIG_NAME

    def ensure_global_config(self) -> bool:
        """Write the default global config if none exists.

        Returns:
            True if a new file was created
        """
        if self.global_config_path.exists():
            return False
        self.global_dir.mkdir(parents=True, exist_ok=True)
        self.global_config_path.write_text(DEFAULT_GLOBAL_CONFIG)
        logger.info(f"Created global config at {self.global_config_path}")
        return True

    def ensure_project_config(self) -> bool:
        """Write the default Viber00t.toml if none exists.

        Returns:
            True if a new file was created
        """
        if self.project_config_path.exists():
            return False
        self.project_config_path.write_text(DEFAULT_PROJECT_CONFIG)
        return True

    def load_global(self) -> GlobalConfig:
        """Load the global config, bootstrapping it on first use."""
        if self._global_config is not None:
            return self._global_config

        try:
            self.ensure_global_config()
        except OSError as e:
            raise ConfigError(f"Could not create global config {self.global_config_path}: {e}") from e
        data = _read_toml(self.global_config_path)
        try:
            config = GlobalConfig(**data)
        except ValidationError as e:
            raise ConfigParseError(f"Invalid global config {self.global_config_path}: {e}") from e

        # Empty values fall back to built-in defaults
        defaults = GlobalConfig()
        updates = {}
        if not config.default_agent:
            updates["default_agent"] = defaults.default_agent
        if not config.default_image:
            updates["default_image"] = defaults.default_image
        if not config.claude_flags:
            updates["claude_flags"] = defaults.claude_flags
        if not config.container_cli:
            updates["container_cli"] = defaults.container_cli
        if updates:
            config = config.model_copy(update=updates)

        self._global_config = config
        return config

    def load_project(self) -> ProjectConfig:
        """Load Viber00t.toml without applying global defaults."""
        if not self.project_config_path.exists():
            raise ConfigNotFoundError(
                f"No {PROJECT_CONFIG_NAME} found. Run 'viber00t init' first."
            )
        data = _read_toml(self.project_config_path)
        try:
            return ProjectConfig(**data)
        except ValidationError as e:
            raise ConfigParseError(f"Invalid {PROJECT_CONFIG_NAME}: {e}") from e

    def config_mtime(self) -> Optional[int]:
        """Modification time of Viber00t.toml in whole seconds, if it can be read."""
        try:
            return int(self.project_config_path.stat().st_mtime)
        except OSError:
            return None

    def resolve(self) -> EffectiveConfig:
        """Merge the project config over the global defaults."""
        global_config = self.load_global()
        project = self.load_project()
        return merge_configs(global_config, project, self.config_mtime())


def merge_configs(global_config: GlobalConfig, project: ProjectConfig,
                  config_mtime: Optional[int] = None) -> EffectiveConfig:
    """Apply global defaults to a project config.

    Default packages and environments are prepended to the first install
    block; scalar fields fall back to the global value only when empty.
    """
    install = project.primary_install
    return EffectiveConfig(
        project_name=project.project.name,
        agent=project.project.agent or global_config.default_agent,
        privileged=project.project.privileged or global_config.default_privileged,
        packages=list(global_config.default_packages) + list(install.packages),
        envs=list(global_config.default_envs) + list(install.envs),
        volumes=list(project.volumes),
        ports=list(project.ports),
        config_mtime=config_mtime,
    )
