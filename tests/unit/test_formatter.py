"""
Unit tests for message formatting
"""
import json
from datetime import datetime
from unittest.mock import Mock

import pytest

from cloudwatch_transport import Formatter, LogRecord, TransportConfig, format_message


class TestFormatMessage:
    """Test the three formatting strategies."""

    def test_json_mode(self):
        meta = {'key': 'value', 'nested': {'count': 3}}

        result = format_message('level', 'message', meta, json_message=True)

        assert json.loads(result) == {'level': 'level', 'msg': 'message', 'meta': meta}

    def test_json_mode_without_meta(self):
        result = format_message('info', 'message', None, json_message=True)

        assert json.loads(result) == {'level': 'info', 'msg': 'message', 'meta': {}}

    def test_json_mode_wins_over_custom_formatter(self):
        custom = Mock(return_value='custom')

        result = format_message('info', 'message', {}, json_message=True, message_formatter=custom)

        custom.assert_not_called()
        assert json.loads(result)['msg'] == 'message'

    def test_text_mode_with_metadata(self):
        result = format_message('level', 'message', {'key': 'value'})

        assert result == 'level - message - {\n  "key": "value"\n}'

    def test_text_mode_without_metadata(self):
        assert format_message('level', 'message', {}) == 'level - message - {}'
        assert format_message('level', 'message') == 'level - message - {}'

    def test_text_mode_serializes_unknown_types_as_strings(self):
        meta = {'when': datetime(2024, 1, 1, 12, 0, 0)}

        result = format_message('info', 'message', meta)

        assert result == 'info - message - {\n  "when": "2024-01-01 12:00:00"\n}'

    def test_text_mode_keeps_non_ascii_characters(self):
        result = format_message('info', 'm', {'name': 'café'})

        assert result == 'info - m - {\n  "name": "café"\n}'

    def test_json_mode_keeps_non_ascii_characters(self):
        result = format_message('info', 'café', {'city': 'München'}, json_message=True)

        assert 'café' in result
        assert '\\u00e9' not in result
        assert json.loads(result) == {'level': 'info', 'msg': 'café', 'meta': {'city': 'München'}}

    def test_custom_formatter_receives_record(self):
        custom = Mock(return_value='custom formatted log message')

        result = format_message('warn', 'disk low', {'free': 10}, message_formatter=custom)

        assert result == 'custom formatted log message'
        custom.assert_called_once_with(LogRecord(level='warn', msg='disk low', meta={'free': 10}))

    def test_custom_formatter_errors_propagate(self):
        def broken(record):
            raise KeyError('missing')

        with pytest.raises(KeyError):
            format_message('info', 'message', {}, message_formatter=broken)

    def test_deterministic(self):
        meta = {'b': 2, 'a': 1}

        assert format_message('info', 'm', meta) == format_message('info', 'm', dict(meta))


class TestFormatter:
    """Test the config-bound formatter."""

    def test_uses_config_strategy(self):
        formatter = Formatter(TransportConfig(json_message=True))

        assert json.loads(formatter.format('info', 'message', {}))['level'] == 'info'

    def test_uses_config_custom_formatter(self):
        formatter = Formatter(TransportConfig(message_formatter=lambda record: f"[{record.level}] {record.msg}"))

        assert formatter.format('error', 'boom') == '[error] boom'

    def test_defaults_to_text(self):
        formatter = Formatter(TransportConfig())

        assert formatter.format('info', 'message') == 'info - message - {}'
