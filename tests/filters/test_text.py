"""
Tests for text filters
"""

from datetime import date

import pytest

from twigfilters.filters.text import (
    CapitalizeFilter,
    ConvertEncodingFilter,
    DefaultFilter,
    FormatFilter,
    JsonEncodeFilter,
    LowerFilter,
    Nl2BrFilter,
    RawFilter,
    ReplaceFilter,
    SplitFilter,
    StripTagsFilter,
    TitleFilter,
    TrimFilter,
    UpperFilter,
    UrlEncodeFilter,
)


class TestCaseFilters:
    """Test upper, lower, capitalize and title"""

    def test_upper_lower(self, ctx):
        assert UpperFilter()(ctx, 'Hello') == 'HELLO'
        assert LowerFilter()(ctx, 'Hello') == 'hello'
        assert UpperFilter()(ctx, None) == ''

    def test_capitalize(self, ctx):
        assert CapitalizeFilter()(ctx, 'hello world') == 'Hello world'
        assert CapitalizeFilter()(ctx, '') == ''

    def test_title(self, ctx):
        assert TitleFilter()(ctx, 'my first car') == 'My First Car'
        assert TitleFilter()(ctx, "o'neil and mcDONALD") == "O'neil And McDONALD"


class TestTrimFilter:
    """Test trim"""

    def test_whitespace(self, ctx):
        assert TrimFilter()(ctx, '  hi \n') == 'hi'

    def test_characters(self, ctx):
        assert TrimFilter()(ctx, '..hi..', '.') == 'hi'

    def test_sides(self, ctx):
        assert TrimFilter()(ctx, '  hi  ', ' ', 'left') == 'hi  '
        assert TrimFilter()(ctx, '  hi  ', ' ', 'right') == '  hi'

    def test_unknown_side_is_absent(self, ctx):
        assert TrimFilter()(ctx, ' hi ', ' ', 'middle') is None


class TestUrlEncodeFilter:
    """Test url_encode"""

    def test_path_segment(self, ctx):
        assert UrlEncodeFilter()(ctx, 'a b/c') == 'a%20b%2Fc'

    def test_reserved_characters_kept(self, ctx):
        assert UrlEncodeFilter()(ctx, 'x@y.z:1') == 'x@y.z:1'

    def test_mapping_is_query_string(self, ctx):
        assert UrlEncodeFilter()(ctx, {'q': 'x y', 'n': 1}) == 'q=x+y&n=1'


class TestMarkupFilters:
    """Test nl2br, striptags and raw"""

    def test_nl2br(self, ctx):
        assert Nl2BrFilter()(ctx, 'a\nb') == 'a<br />\nb'
        assert Nl2BrFilter()(ctx, 'a\r\nb') == 'a<br />\r\nb'

    def test_striptags(self, ctx):
        assert StripTagsFilter()(ctx, '<p>Hello <b>World</b></p><!-- note -->') == 'Hello World'

    def test_striptags_allowed(self, ctx):
        result = StripTagsFilter()(ctx, '<p>Hello <b>World</b><br/></p>', '<b><br>')
        assert result == 'Hello <b>World</b><br/>'

    def test_raw_is_identity(self, ctx):
        value = {'html': '<b>x</b>'}
        assert RawFilter()(ctx, value) is value


class TestReplaceFilter:
    """Test replace"""

    def test_mapping(self, ctx):
        result = ReplaceFilter()(ctx, 'I like %this% and %that%.', {'%this%': 'apples', '%that%': 'pears'})
        assert result == 'I like apples and pears.'

    def test_search_and_replacement(self, ctx):
        assert ReplaceFilter()(ctx, 'a-b-c', '-', '+') == 'a+b+c'

    def test_longest_search_wins(self, ctx):
        assert ReplaceFilter()(ctx, 'abc', {'a': '1', 'ab': '2'}) == '2c'

    def test_replaced_text_is_not_rescanned(self, ctx):
        assert ReplaceFilter()(ctx, 'aaa', {'a': 'aa'}) == 'aaaaaa'

    def test_missing_arguments_is_absent(self, ctx):
        assert ReplaceFilter()(ctx, 'abc') is None


class TestSplitFilter:
    """Test split"""

    def test_delimiter(self, ctx):
        assert SplitFilter()(ctx, 'one,two,three', ',') == ['one', 'two', 'three']

    def test_positive_limit(self, ctx):
        assert SplitFilter()(ctx, 'one,two,three', ',', 2) == ['one', 'two,three']

    def test_negative_limit(self, ctx):
        assert SplitFilter()(ctx, 'one,two,three', ',', -1) == ['one', 'two']

    def test_empty_delimiter(self, ctx):
        assert SplitFilter()(ctx, 'abc', '') == ['a', 'b', 'c']
        assert SplitFilter()(ctx, 'abcde', '', 2) == ['ab', 'cd', 'e']

    def test_missing_delimiter_is_absent(self, ctx):
        assert SplitFilter()(ctx, 'abc') is None


class TestFormatFilter:
    """Test format"""

    def test_placeholders(self, ctx):
        assert FormatFilter()(ctx, 'I like %s and %s.', 'foo', 'bar') == 'I like foo and bar.'

    def test_numbers(self, ctx):
        assert FormatFilter()(ctx, '%05.1f', 3.14159) == '003.1'

    @pytest.mark.parametrize('args', [('x',), ()])
    def test_mismatched_arguments_are_absent(self, ctx, args):
        assert FormatFilter()(ctx, '%d items', *args) is None

    @pytest.mark.parametrize('fmt, arg', [('%c', 10 ** 10), ('%d', float('inf'))])
    def test_out_of_range_arguments_are_absent(self, ctx, fmt, arg):
        assert FormatFilter()(ctx, fmt, arg) is None


class TestConvertEncodingFilter:
    """Test convert_encoding"""

    def test_unrepresentable_characters(self, ctx):
        assert ConvertEncodingFilter()(ctx, 'café', 'ascii') == 'caf?'

    def test_bytes_are_decoded(self, ctx):
        assert ConvertEncodingFilter()(ctx, b'caf\xe9', 'utf-8', 'iso-8859-1') == 'café'

    def test_unknown_charset_is_absent(self, ctx):
        assert ConvertEncodingFilter()(ctx, 'abc', 'no-such-charset') is None

    def test_codec_without_replacement_is_absent(self, ctx):
        assert ConvertEncodingFilter()(ctx, 'abc', 'idna') is None

    def test_missing_charset_is_absent(self, ctx):
        assert ConvertEncodingFilter()(ctx, 'abc') is None


class TestJsonEncodeFilter:
    """Test json_encode"""

    def test_compact(self, ctx):
        assert JsonEncodeFilter()(ctx, {'a': [1, 2], 'b': None}) == '{"a":[1,2],"b":null}'

    def test_unserializable_values_become_strings(self, ctx):
        assert JsonEncodeFilter()(ctx, [date(2023, 7, 4)]) == '["2023-07-04"]'


class TestDefaultFilter:
    """Test default"""

    @pytest.mark.parametrize('value', [None, '', [], {}, False])
    def test_empty_values(self, ctx, value):
        assert DefaultFilter()(ctx, value, 'N/A') == 'N/A'

    @pytest.mark.parametrize('value', ['v', 0, [0], {'a': 1}])
    def test_non_empty_values(self, ctx, value):
        assert DefaultFilter()(ctx, value, 'N/A') == value

    def test_without_default(self, ctx):
        assert DefaultFilter()(ctx, '') is None
