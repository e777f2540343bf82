"""Configuration Resolver: CLI options + targets -> effective UserConfig.

Resolution steps:
    1. Reject runs that mix local files with remote URLs.
    2. Load the configuration file, or synthesize the default one.
    3. Resolve the language: CLI flag > config value > OS locale.
    4. Deep-merge ``HINTSCAN_*`` environment overrides, then re-apply an
       explicit CLI language so the flag still wins.

"No configuration found" is never an error here. A file that exists but
cannot be parsed is, and it is not recoverable.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path

from hintscan.core.config.environment import deep_merge, env_overrides, is_ci, os_language
from hintscan.core.config.loader import load_user_config
from hintscan.core.config.models import CLIOptions, UserConfig
from hintscan.core.config.targets import any_file, are_files
from hintscan.core.messages import show_default_config_notice
from hintscan.exceptions import UsageError

logger = logging.getLogger(__name__)

DEVELOPMENT_PRESET = "development"
WEB_RECOMMENDED_PRESET = "web-recommended"

# Non-interactive formatters forced under CI: machine-readable + human-readable.
CI_FORMATTERS: tuple[str, ...] = ("json", "stylish")


def check_targets(targets: Sequence[str]) -> None:
    """Fail fast when local files and remote URLs are mixed.

    Raises:
        UsageError: If some but not all targets use the ``file:`` scheme.
    """
    if any_file(targets) and not are_files(targets):
        raise UsageError("You cannot mix file system paths with URLs in the analysis")


def default_configuration(
    targets: Sequence[str],
    *,
    environ: Mapping[str, str] | None = None,
    notify: bool = True,
) -> UserConfig:
    """Compute the fallback configuration for ``targets``.

    Local targets extend the ``development`` preset, remote ones the
    ``web-recommended`` preset.

    Raises:
        UsageError: If the targets mix local files and URLs.
    """
    check_targets(targets)
    if notify:
        show_default_config_notice()

    preset = DEVELOPMENT_PRESET if are_files(targets) else WEB_RECOMMENDED_PRESET
    config = UserConfig(extends=[preset])
    if is_ci(environ):
        config = dataclasses.replace(config, formatters=list(CI_FORMATTERS))
    logger.debug("Using default configuration extending %s", preset)
    return config


def resolve_language(
    config: UserConfig | None,
    options: CLIOptions | None,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Pick the effective language; the first source that has one wins."""
    if options is not None and options.language:
        logger.debug("Using language option provided from command line: %s", options.language)
        return options.language
    if config is not None and config.language:
        logger.debug("Using language option provided in user config file: %s", config.language)
        return config.language
    language = os_language(environ)
    logger.debug("Using language option configured in the OS: %s", language)
    return language


def apply_env_overrides(
    config: UserConfig,
    environ: Mapping[str, str] | None = None,
) -> UserConfig:
    """Merge ``HINTSCAN_*`` variables onto ``config``."""
    overrides = env_overrides(environ)
    if not overrides:
        return config
    return UserConfig.from_dict(deep_merge(config.to_dict(), overrides))


def resolve(
    options: CLIOptions,
    targets: Sequence[str],
    *,
    environ: Mapping[str, str] | None = None,
    cwd: Path | None = None,
    home: Path | None = None,
) -> UserConfig:
    """Produce the effective configuration for a run.

    Args:
        options: Parsed command-line options.
        targets: Normalized target URLs.
        environ: Environment mapping (defaults to ``os.environ``).
        cwd: Override for configuration discovery (for testing).
        home: Override for configuration discovery (for testing).

    Raises:
        UsageError: If the targets mix local files and URLs.
        ConfigurationFileError: If a configuration file fails to load.
    """
    check_targets(targets)

    config = load_user_config(options.config, cwd=cwd, home=home)
    if config is None:
        config = default_configuration(targets, environ=environ)

    config = dataclasses.replace(config, language=resolve_language(config, options, environ))
    config = apply_env_overrides(config, environ)
    if options.language:
        config = dataclasses.replace(config, language=options.language)
    return config
