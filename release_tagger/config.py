"""
Configuration management for release-tagger.

Handles environment variable loading, validation, and provides a centralized
configuration object for the entire application.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv
from loguru import logger

from .logging_config import VERBOSE

# Load environment variables from .env file
load_dotenv()

VALID_LOG_LEVELS = ['DEBUG', VERBOSE, 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def get_config_value(cli_args, field_name: str, env_key: str, default, value_type: type = str):
    """
    Get configuration value with proper precedence: CLI args > env vars > defaults.

    Args:
        cli_args: CLI arguments object or None
        field_name: Name of the CLI argument field
        env_key: Environment variable key
        default: Default value if neither CLI nor env var is set
        value_type: Type to convert the value to (str, int, bool)

    Returns:
        The configuration value converted to the specified type
    """
    cli_value = getattr(cli_args, field_name, None) if cli_args else None
    if cli_value is not None:
        return cli_value

    env_value = os.environ.get(env_key, '')

    # Handle boolean conversion specially
    if value_type == bool:
        if env_value.strip().lower() in ('true', '1', 'yes'):
            return True
        elif env_value.strip().lower() in ('false', '0', 'no'):
            return False
        return default

    if not env_value:
        return default

    try:
        return value_type(env_value)
    except (ValueError, TypeError):
        return default


def get_config_value_str(cli_args, field_name: str, env_key: str, default: str = '') -> str:
    """Get string configuration value."""
    return get_config_value(cli_args, field_name, env_key, default, str)


def get_config_value_bool(cli_args, field_name: str, env_key: str, default: bool = False) -> bool:
    """Get boolean configuration value."""
    return get_config_value(cli_args, field_name, env_key, default, bool)


@dataclass
class Config:
    """Configuration object containing all application settings."""

    # Git
    git_program: str
    commit: str
    tag_prefix: str

    # Behaviour
    dry_run: bool
    verbose: bool

    # Logging
    log_level: str

    @property
    def effective_log_level(self) -> str:
        """Log level after --verbose (implied by --dryrun) is taken into account."""
        if self.verbose and self.log_level not in ('DEBUG', VERBOSE):
            return VERBOSE
        return self.log_level


def load_config(cli_args=None) -> Optional[Config]:
    """
    Load and validate configuration from CLI arguments and environment variables.
    CLI arguments take precedence over environment variables.

    Args:
        cli_args: Parsed CLI arguments or None

    Returns:
        Config: Validated configuration object, or None if validation failed
    """
    git_program = get_config_value_str(cli_args, 'git', 'RELEASE_TAGGER_GIT', 'git')
    commit = get_config_value_str(cli_args, 'commit', 'RELEASE_TAGGER_COMMIT', 'HEAD')
    tag_prefix = get_config_value_str(cli_args, 'tag_prefix', 'RELEASE_TAGGER_TAG_PREFIX', 'v')

    # store_true flags are False rather than None when not given
    dry_run = bool(getattr(cli_args, 'dryrun', False)) or \
        get_config_value_bool(None, 'dryrun', 'RELEASE_TAGGER_DRY_RUN', False)
    verbose = bool(getattr(cli_args, 'verbose', False)) or \
        get_config_value_bool(None, 'verbose', 'RELEASE_TAGGER_VERBOSE', False)

    # Dry-run shows what would happen, so it implies verbose
    if dry_run:
        verbose = True

    # Handle log_level (case insensitive)
    log_level = get_config_value_str(cli_args, 'log_level', 'LOG_LEVEL', 'INFO').upper()

    validation_errors = []

    if log_level not in VALID_LOG_LEVELS:
        validation_errors.append(f'LOG_LEVEL must be one of {VALID_LOG_LEVELS} (got: {log_level})')

    if not git_program.strip():
        validation_errors.append('Git program must not be empty (use --git or set RELEASE_TAGGER_GIT)')

    if not commit.strip():
        validation_errors.append('Commit must not be empty (use --commit or set RELEASE_TAGGER_COMMIT)')

    if validation_errors:
        logger.error('Configuration Error:')
        for i, error_msg in enumerate(validation_errors, 1):
            logger.error(f'   {i}. {error_msg}')
        return None

    config = Config(
        git_program=git_program,
        commit=commit,
        tag_prefix=tag_prefix,
        dry_run=dry_run,
        verbose=verbose,
        log_level=log_level,
    )

    logger.debug(f'RELEASE_TAGGER_GIT = {config.git_program}')
    logger.debug(f'RELEASE_TAGGER_COMMIT = {config.commit}')
    logger.debug(f'RELEASE_TAGGER_TAG_PREFIX = {config.tag_prefix}')
    logger.debug(f'RELEASE_TAGGER_DRY_RUN = {config.dry_run}')
    logger.debug(f'RELEASE_TAGGER_VERBOSE = {config.verbose}')

    return config
