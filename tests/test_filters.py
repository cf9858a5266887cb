import re

import pytest

from core.filters import ResponseFilter
from utils.config import ConfigError


def test_no_filters_accepts_everything():
    response_filter = ResponseFilter()
    assert not response_filter.has_filters()
    assert response_filter.get_summary() == "No filters active"
    for status in (200, 301, 404, 500, 599):
        assert response_filter.accept(status, b"")
        assert response_filter.accept(status, b"x" * 10000)


def test_status_allow_list():
    response_filter = ResponseFilter(status_codes="200, 301")
    assert response_filter.accept(200, b"")
    assert response_filter.accept(301, b"")
    assert not response_filter.accept(404, b"")
    assert "404" in response_filter.rejection_reason(404, b"")


def test_status_allow_list_from_iterable():
    response_filter = ResponseFilter(status_codes=[403])
    assert response_filter.accept(403, b"")
    assert not response_filter.accept(200, b"")


def test_min_length():
    response_filter = ResponseFilter(min_length=5)
    assert not response_filter.accept(200, b"1234")
    assert response_filter.accept(200, b"12345")


def test_max_length():
    response_filter = ResponseFilter(max_length=5)
    assert response_filter.accept(200, b"12345")
    assert not response_filter.accept(200, b"123456")


def test_length_window():
    response_filter = ResponseFilter(min_length=2, max_length=4)
    assert [response_filter.accept(200, b"x" * n) for n in range(6)] == [
        False, False, True, True, True, False,
    ]


def test_regex_matches_raw_bytes():
    response_filter = ResponseFilter(regex="welcome")
    assert response_filter.accept(200, b"<h1>welcome back</h1>")
    assert not response_filter.accept(200, b"<h1>login</h1>")
    assert response_filter.accept(200, b"\xff\xfe binary welcome \x00")


def test_compiled_text_regex():
    response_filter = ResponseFilter(regex=re.compile(r"admin\s+panel"))
    assert response_filter.accept(200, b"the admin  panel")
    assert not response_filter.accept(200, b"nothing here")


def test_predicates_are_conjunctive():
    response_filter = ResponseFilter(status_codes=[200], min_length=3, regex="ok")
    assert response_filter.accept(200, b"all ok")
    assert not response_filter.accept(404, b"all ok")
    assert not response_filter.accept(200, b"ok")
    assert not response_filter.accept(200, b"fine")


def test_invalid_inputs_raise_config_error():
    with pytest.raises(ConfigError):
        ResponseFilter(status_codes="200,abc")
    with pytest.raises(ConfigError):
        ResponseFilter(regex="(unclosed")


def test_summary_lists_active_filters():
    summary = ResponseFilter(status_codes="301,200", min_length=1, regex="hi").get_summary()
    assert "Matching codes: 200, 301" in summary
    assert "Min length: 1" in summary
    assert "Matching regex: hi" in summary


def test_from_config(make_config):
    config = make_config(match_codes="200", max_length=10, match_regex="x")
    response_filter = ResponseFilter.from_config(config)
    assert response_filter.status_codes == {200}
    assert response_filter.max_length == 10
    assert response_filter.accept(200, b"x")
    assert not response_filter.accept(200, b"y")
