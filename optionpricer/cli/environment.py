"""
Environment Management for the Option Pricer

Manages different environments (development, staging, production, test)
with environment-specific simulation defaults and logging settings.
"""

import os
from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional
import logging

import yaml

logger = logging.getLogger(__name__)


class Environment(str, Enum):
    """Available environments."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TEST = "test"


@dataclass
class EnvironmentSettings:
    """Settings specific to an environment."""

    name: Environment

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    # Monte Carlo engine
    mc_simulations: int = 50_000
    mc_seed: Optional[int] = None

    # Delta-hedging simulator
    hedge_steps: int = 50
    hedge_paths: int = 2000
    transaction_cost: float = 0.0

    # Capital estimate
    margin_pct: float = 0.20

    # Payoff grid (fractions of spot)
    grid_min_pct: float = 0.20
    grid_max_pct: float = 2.00
    grid_points: int = 201

    # Output settings
    output_directory: str = "./output"

    # Additional settings
    extra: Dict[str, Any] = field(default_factory=dict)


# Default settings for each environment
DEFAULT_SETTINGS: Dict[Environment, Dict[str, Any]] = {
    Environment.DEVELOPMENT: {
        "log_level": "DEBUG",
        "output_directory": "./output/dev",
        "mc_simulations": 20_000,
    },
    Environment.STAGING: {
        "log_level": "INFO",
        "output_directory": "./output/staging",
    },
    Environment.PRODUCTION: {
        "log_level": "WARNING",
        "output_directory": "./output/prod",
        "mc_simulations": 200_000,
        "hedge_paths": 10_000,
    },
    Environment.TEST: {
        "log_level": "DEBUG",
        "output_directory": "./output/test",
        "mc_simulations": 5_000,
        "mc_seed": 42,
        "hedge_paths": 200,
    },
}


class EnvironmentManager:
    """
    Resolves the active environment and its settings.

    Settings are the per-environment defaults overlaid with the first config
    file found. Directories are searched in this order:

        $OPTIONPRICER_CONFIG_DIR, ./config, ./.config, ~/.optionpricer, /etc/optionpricer

    Inside a directory `<env>.yaml`, `<env>.yml` and `<env>.json` win over a
    shared `config.yaml`/`config.yml`, which may hold one section per
    environment.
    """

    ENV_VAR = "OPTIONPRICER_ENV"
    CONFIG_DIR_VAR = "OPTIONPRICER_CONFIG_DIR"

    SHARED_CONFIG_NAMES = ("config.yaml", "config.yml")

    _current_env: Optional[Environment] = None
    _settings: Optional[EnvironmentSettings] = None

    @classmethod
    def get_environment(cls) -> Environment:
        """Explicit set_environment() first, then $OPTIONPRICER_ENV, then development."""
        if cls._current_env is not None:
            return cls._current_env

        env_str = os.environ.get(cls.ENV_VAR, Environment.DEVELOPMENT.value).lower()

        try:
            return Environment(env_str)
        except ValueError:
            logger.warning(
                f"Unknown environment '{env_str}', defaulting to development"
            )
            return Environment.DEVELOPMENT

    @classmethod
    def set_environment(cls, env: Environment) -> None:
        cls._current_env = env
        cls._settings = None
        logger.info(f"Environment set to: {env.value}")

    @classmethod
    def get_settings(cls) -> EnvironmentSettings:
        """Settings of the current environment, cached until the environment changes."""
        if cls._settings is None:
            env = cls.get_environment()
            cls._settings = build_settings(env, cls._load_config_file(env))
        return cls._settings

    @classmethod
    def config_search_paths(cls) -> List[Path]:
        paths = []
        override = os.environ.get(cls.CONFIG_DIR_VAR)
        if override:
            paths.append(Path(override).expanduser())
        cwd = Path.cwd()
        paths.extend([
            cwd / "config",
            cwd / ".config",
            Path.home() / ".optionpricer",
            Path("/etc/optionpricer"),
        ])
        return paths

    @classmethod
    def _candidate_files(cls, env: Environment) -> Iterator[Path]:
        names = [f"{env.value}{suffix}" for suffix in (".yaml", ".yml", ".json")]
        names.extend(cls.SHARED_CONFIG_NAMES)
        for directory in cls.config_search_paths():
            for name in names:
                yield directory / name

    @classmethod
    def _load_config_file(cls, env: Environment) -> Optional[Dict[str, Any]]:
        for config_path in cls._candidate_files(env):
            if not config_path.is_file():
                continue
            try:
                with open(config_path) as f:
                    data = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Failed to load {config_path}: {e}")
                continue

            if not isinstance(data, dict):
                logger.warning(f"Ignoring {config_path}: top level is not a mapping")
                continue

            logger.debug(f"Loaded config from {config_path}")
            section = data.get(env.value)
            return section if isinstance(section, dict) else data

        return None

    @classmethod
    def reset(cls) -> None:
        """Forget the explicit environment and the cached settings."""
        cls._current_env = None
        cls._settings = None


def build_settings(
    env: Environment,
    overrides: Optional[Dict[str, Any]] = None
) -> EnvironmentSettings:
    """
    Overlay config-file values on the defaults of an environment.

    Keys that are not EnvironmentSettings fields are collected under `extra`,
    together with an explicit `extra` mapping if the file has one.
    """
    merged = {**DEFAULT_SETTINGS.get(env, {}), **(overrides or {})}
    known = {f.name for f in fields(EnvironmentSettings)} - {"name", "extra"}

    extra = dict(merged.pop("extra", None) or {})
    extra.update({k: v for k, v in merged.items() if k not in known})

    return EnvironmentSettings(
        name=env,
        extra=extra,
        **{k: v for k, v in merged.items() if k in known},
    )


def get_environment() -> Environment:
    """Get current environment."""
    return EnvironmentManager.get_environment()


def get_settings() -> EnvironmentSettings:
    """Get current environment settings."""
    return EnvironmentManager.get_settings()


def set_environment(env: Environment) -> None:
    """Set current environment."""
    EnvironmentManager.set_environment(env)


def configure_logging() -> None:
    """Configure logging based on environment settings."""
    settings = get_settings()

    # Set log level
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    # Console handler
    if not root_logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    # File handler (if configured)
    if settings.log_file:
        file_handler = logging.FileHandler(settings.log_file)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    logger.info(f"Logging configured for {settings.name.value} environment")
