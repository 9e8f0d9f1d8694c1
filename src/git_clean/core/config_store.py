"""Global configuration model and persistence.

The only persisted state is the user's GitHub personal access token, stored
in config.toml under the platform's application config directory.
"""

import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from pathlib import Path

import click
import tomli
import tomli_w

from git_clean.gateway.http.real import GITHUB_API_URL

logger = logging.getLogger(__name__)

APP_NAME = "git-clean"
CONFIG_FILENAME = "config.toml"


@dataclass(frozen=True)
class GlobalConfig:
    """User-wide git-clean configuration.

    Attributes:
        personal_access_token: GitHub token, or None for anonymous API access
        api_url: GitHub REST API base URL
    """

    personal_access_token: str | None = None
    api_url: str = GITHUB_API_URL

    def with_token(self, token: str) -> "GlobalConfig":
        return replace(self, personal_access_token=token)


class ConfigStore(ABC):
    """Abstract interface for loading and saving the global config."""

    @abstractmethod
    def path(self) -> Path:
        """Location of the config file."""
        ...

    @abstractmethod
    def exists(self) -> bool:
        ...

    @abstractmethod
    def load(self) -> GlobalConfig:
        """Load the config, falling back to defaults when missing or unreadable."""
        ...

    @abstractmethod
    def save(self, config: GlobalConfig) -> None:
        ...


def get_config_path() -> Path:
    return Path(click.get_app_dir(APP_NAME)) / CONFIG_FILENAME


class RealConfigStore(ConfigStore):
    """TOML-backed config store.

    Example config.toml:
      personal_access_token = "ghp_..."
      api_url = "https://api.github.com"
    """

    def __init__(self, config_path: Path | None = None) -> None:
        self._path = config_path if config_path is not None else get_config_path()

    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    def load(self) -> GlobalConfig:
        if not self._path.exists():
            return GlobalConfig()

        try:
            data = tomli.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, tomli.TOMLDecodeError) as e:
            logger.warning("Ignoring unreadable config file %s: %s", self._path, e)
            return GlobalConfig()

        token = data.get("personal_access_token")
        api_url = data.get("api_url")
        return GlobalConfig(
            personal_access_token=str(token) if token else None,
            api_url=str(api_url) if api_url else GITHUB_API_URL,
        )

    def save(self, config: GlobalConfig) -> None:
        # Ensure config directory exists
        self._path.parent.mkdir(parents=True, exist_ok=True)

        data: dict[str, str] = {"api_url": config.api_url}
        if config.personal_access_token is not None:
            data["personal_access_token"] = config.personal_access_token

        # The file holds a credential; restrict it before the token is written.
        # os.open applies the mode only on creation, so an existing file is fchmod-ed.
        fd = os.open(self._path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        os.fchmod(fd, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(tomli_w.dumps(data))


class FakeConfigStore(ConfigStore):
    """In-memory config store for tests.

    Mutation Tracking:
    - saved_configs: every config passed to save(), in call order
    """

    def __init__(self, *, config: GlobalConfig | None = None) -> None:
        self._config = config
        self._saved_configs: list[GlobalConfig] = []

    def path(self) -> Path:
        return Path("/fake/config") / APP_NAME / CONFIG_FILENAME

    def exists(self) -> bool:
        return self._config is not None

    def load(self) -> GlobalConfig:
        return self._config if self._config is not None else GlobalConfig()

    def save(self, config: GlobalConfig) -> None:
        self._config = config
        self._saved_configs.append(config)

    @property
    def saved_configs(self) -> list[GlobalConfig]:
        return self._saved_configs.copy()
