"""
Tests for config.py module.

Tests configuration precedence, dry-run/verbose handling and validation.
"""

from argparse import Namespace
from unittest.mock import MagicMock, patch

from release_tagger.config import Config, get_config_value, load_config


def make_args(**overrides):
    """Namespace shaped like the parsed command line."""
    values = dict(git=None, commit=None, tag_prefix=None, dryrun=False, verbose=False, log_level=None)
    values.update(overrides)
    return Namespace(**values)


class TestGetConfigValue:
    """Test config value precedence."""

    def test_get_config_value_cli_precedence(self):
        """Test that CLI args take precedence over env vars."""
        cli_args = MagicMock()
        cli_args.test_field = "cli_value"

        with patch.dict('os.environ', {'TEST_FIELD': 'env_value'}):
            result = get_config_value(cli_args, 'test_field', 'TEST_FIELD', 'default')
            assert result == "cli_value"

    def test_get_config_value_env_fallback(self):
        """Test that env vars are used when CLI args are None."""
        cli_args = MagicMock()
        cli_args.test_field = None

        with patch.dict('os.environ', {'TEST_FIELD': 'env_value'}):
            result = get_config_value(cli_args, 'test_field', 'TEST_FIELD', 'default')
            assert result == "env_value"

    def test_get_config_value_default_fallback(self):
        """Test that defaults are used when neither CLI nor env are set."""
        with patch.dict('os.environ', {}, clear=True):
            result = get_config_value(None, 'test_field', 'TEST_FIELD', 'default')
            assert result == "default"

    def test_get_config_value_boolean_conversion(self):
        """Test boolean value conversion."""
        for value in ['true', 'True', '1', 'yes', 'YES']:
            with patch.dict('os.environ', {'BOOL_FIELD': value}):
                assert get_config_value(None, 'bool_field', 'BOOL_FIELD', False, bool) is True

        for value in ['false', 'False', '0', 'no', 'NO']:
            with patch.dict('os.environ', {'BOOL_FIELD': value}):
                assert get_config_value(None, 'bool_field', 'BOOL_FIELD', True, bool) is False

    def test_get_config_value_boolean_unrecognized(self):
        with patch.dict('os.environ', {'BOOL_FIELD': 'maybe'}):
            assert get_config_value(None, 'bool_field', 'BOOL_FIELD', True, bool) is True


class TestLoadConfig:
    """Test configuration loading and validation."""

    def test_load_config_defaults(self):
        with patch.dict('os.environ', {}, clear=True):
            config = load_config(make_args())

        assert config == Config(
            git_program='git',
            commit='HEAD',
            tag_prefix='v',
            dry_run=False,
            verbose=False,
            log_level='INFO',
        )

    def test_load_config_without_args(self):
        with patch.dict('os.environ', {}, clear=True):
            config = load_config()
        assert config.git_program == 'git'

    def test_load_config_from_env(self):
        env = {
            'RELEASE_TAGGER_GIT': '/usr/bin/git',
            'RELEASE_TAGGER_COMMIT': 'main',
            'RELEASE_TAGGER_TAG_PREFIX': 'release-',
            'RELEASE_TAGGER_VERBOSE': 'true',
            'LOG_LEVEL': 'warning',
        }
        with patch.dict('os.environ', env, clear=True):
            config = load_config(make_args())

        assert config.git_program == '/usr/bin/git'
        assert config.commit == 'main'
        assert config.tag_prefix == 'release-'
        assert config.verbose is True
        assert config.log_level == 'WARNING'

    def test_cli_overrides_env(self):
        with patch.dict('os.environ', {'RELEASE_TAGGER_TAG_PREFIX': 'release-'}, clear=True):
            config = load_config(make_args(tag_prefix=''))
        assert config.tag_prefix == ''

    def test_dry_run_implies_verbose(self):
        with patch.dict('os.environ', {}, clear=True):
            config = load_config(make_args(dryrun=True))
        assert config.dry_run is True
        assert config.verbose is True
        assert config.effective_log_level == 'VERBOSE'

    def test_dry_run_from_env(self):
        with patch.dict('os.environ', {'RELEASE_TAGGER_DRY_RUN': '1'}, clear=True):
            config = load_config(make_args())
        assert config.dry_run is True

    def test_verbose_keeps_debug(self):
        with patch.dict('os.environ', {}, clear=True):
            config = load_config(make_args(verbose=True, log_level='debug'))
        assert config.effective_log_level == 'DEBUG'

    def test_effective_log_level_without_verbose(self):
        with patch.dict('os.environ', {}, clear=True):
            config = load_config(make_args(log_level='error'))
        assert config.effective_log_level == 'ERROR'

    @patch('release_tagger.config.logger')
    def test_invalid_log_level(self, mock_logger):
        with patch.dict('os.environ', {'LOG_LEVEL': 'LOUD'}, clear=True):
            config = load_config(make_args())

        assert config is None
        mock_logger.error.assert_called()

    @patch('release_tagger.config.logger')
    def test_all_validation_errors_reported(self, mock_logger):
        with patch.dict('os.environ', {}, clear=True):
            config = load_config(make_args(git='  ', commit='', log_level='LOUD'))

        assert config is None
        messages = [call.args[0] for call in mock_logger.error.call_args_list]
        assert any('LOG_LEVEL' in message for message in messages)
        assert any('Git program' in message for message in messages)
        assert any('Commit' in message for message in messages)
