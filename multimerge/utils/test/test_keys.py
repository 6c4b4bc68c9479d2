import pytest
from pytest import raises

from multimerge import merge
from multimerge.utils.exceptions import ConfigException
from multimerge.utils.keys import make_line_key, parse_fields


# ============================================================================
def test_whole_line():
    assert make_line_key() is None
    assert make_line_key('') is None


def test_numeric_whole_line():
    key = make_line_key(numeric=True)
    assert key('10\n') == 10.0
    assert list(merge(['2', '10'], ['3'], key=key)) == ['2', '3', '10']


def test_multi_field_tuple():
    key = make_line_key('3,1')
    assert key('a b c') == ('c', 'a')
    assert key('a b') == ('', 'a')


def test_numeric_missing_field():
    key = make_line_key('2', numeric=True)
    assert key('a') == 0.0


@pytest.mark.parametrize('fields', ['x', '-1', '0', ',', []])
def test_invalid_fields(fields):
    with raises(ConfigException):
        parse_fields(fields)


def test_merge_by_field():
    first = ['b 1', 'a 3']
    second = ['c 2', 'd 4']
    res = list(merge(first, second, key=make_line_key('2', numeric=True)))
    assert res == ['b 1', 'c 2', 'a 3', 'd 4']


def test_numeric_failure_surfaces_through_merge():
    key = make_line_key('1', numeric=True)
    with raises(ValueError):
        list(merge(['1', '2'], ['1.5', 'abc'], key=key))
