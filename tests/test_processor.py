"""
Tests for FilterProcessor and configuration
"""

import logging

import pytest

from twigfilters import FilterProcessor, parse_filter
from twigfilters.config import FilterConfig, get_config, set_config
from twigfilters.filters import FilterError


class TestParseFilter:
    """Test filter spec parsing"""

    def test_name_only(self):
        assert parse_filter('upper') == ('upper', [])
        assert parse_filter('upper()') == ('upper', [])

    def test_json_arguments(self):
        assert parse_filter('join(", ")') == ('join', [', '])
        assert parse_filter('batch(3, "-")') == ('batch', [3, '-'])
        assert parse_filter('merge([3, 4])') == ('merge', [[3, 4]])

    def test_tuple(self):
        assert parse_filter(('date', ('dd/MM/yyyy',))) == ('date', ['dd/MM/yyyy'])

    @pytest.mark.parametrize('spec', ['bad(', 'batch(2,', 'two words'])
    def test_invalid(self, spec):
        with pytest.raises(FilterError):
            parse_filter(spec)

    @pytest.mark.parametrize('spec', [['upper'], None, 42, ('date',), ('date', [], 'extra')])
    def test_unsupported_spec_shapes(self, spec):
        with pytest.raises(FilterError):
            parse_filter(spec)


class TestFilterProcessor:
    """Test filter chains"""

    def test_batch_with_fill(self):
        processor = FilterProcessor()
        assert processor.process([1, 2, 3, 4, 5], ['batch(2, 0)']) == [[1, 2], [3, 4], [5, 0]]

    def test_chain(self):
        processor = FilterProcessor()
        result = processor.process(['b', 'a'], ['sort', 'merge(["c"])', 'join("-")', 'upper'])
        assert result == 'A-B-C'

    def test_date_tuple_spec(self):
        processor = FilterProcessor()
        assert processor.process('2023-07-04', [('date', ['dd/MM/yyyy'])]) == '\n 04/07/2023'

    def test_failed_step_is_skipped(self, caplog):
        caplog.set_level(logging.WARNING, logger='twigfilters')
        processor = FilterProcessor()

        result = processor.process('hello', ['nope', 'upper'])

        assert result == 'HELLO'
        assert processor.get_stats()['filters_failed'] == 1
        assert processor.get_stats()['filters_applied'] == 1
        assert any('nope' in r.getMessage() for r in caplog.records)

    def test_unsupported_spec_is_skipped(self):
        processor = FilterProcessor()

        assert processor.process('hello', [['upper'], 'upper']) == 'HELLO'
        assert processor.get_stats()['filters_failed'] == 1

    def test_absent_results_are_counted(self):
        processor = FilterProcessor()
        assert processor.process('x', ['batch(2)']) is None
        assert processor.get_stats()['absent_results'] == 1

    def test_context_is_passed(self):
        seen = {}

        class Spy:
            def apply(self, name, ctx, value, *args):
                seen['ctx'] = ctx
                return value

        FilterProcessor(context={'locale': 'en_US'}, registry=Spy()).process('x', ['raw'])
        assert seen['ctx'] == {'locale': 'en_US'}

    def test_render(self):
        processor = FilterProcessor()
        assert processor.render([1, 2], ['merge([3])']) == '[1, 2, 3]'
        assert processor.render('2023-07-04', ['date("yyyy")']) == '\n 2023'
        assert processor.render('not-a-date', ['date']) == ''


class TestConfig:
    """Test configuration loading"""

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv('TWIGFILTERS_DIAGNOSTICS', 'true')
        monkeypatch.setenv('TWIGFILTERS_SORT_MAPPING_KEYS', '0')

        config = FilterConfig.from_env()

        assert config.diagnostics is True
        assert config.sort_mapping_keys is False

    def test_singleton_reloads_after_reset(self, monkeypatch):
        monkeypatch.setenv('TWIGFILTERS_SORT_MAPPING_KEYS', 'yes')
        set_config(None)

        assert get_config() is get_config()
        assert get_config().sort_mapping_keys is True
