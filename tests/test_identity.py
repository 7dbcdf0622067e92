"""
Tests for reading the user identity from the session cookie.
"""
from insights.analysis import ANONYMOUS_USER_ID, parse_user_cookie


def test_missing_cookie_is_anonymous():
    identity = parse_user_cookie(None)
    assert identity.user_id == ANONYMOUS_USER_ID == 0
    assert identity.authenticated is False
    assert identity.reason == "cookie absent"


def test_empty_cookie_is_anonymous():
    assert parse_user_cookie("").user_id == 0


def test_json_cookie_yields_user_id():
    identity = parse_user_cookie('{"id": 42, "nome": "Maria"}')
    assert identity.user_id == 42
    assert identity.authenticated is True
    assert identity.reason is None


def test_url_encoded_cookie_is_decoded():
    identity = parse_user_cookie("%7B%22id%22%3A7%2C%22nome%22%3A%22Jo%C3%A3o%22%7D")
    assert identity.user_id == 7
    assert identity.authenticated is True


def test_numeric_string_id_is_accepted():
    assert parse_user_cookie('{"id": "15"}').user_id == 15


def test_malformed_json_is_anonymous():
    identity = parse_user_cookie("{not json")
    assert identity.user_id == 0
    assert identity.reason == "cookie is not valid JSON"


def test_non_object_json_is_anonymous():
    identity = parse_user_cookie("[1, 2, 3]")
    assert identity.user_id == 0
    assert identity.reason == "cookie is not a JSON object"


def test_missing_or_unusable_id_is_anonymous():
    for raw in ('{"nome": "Sem id"}', '{"id": null}', '{"id": true}', '{"id": "abc"}', '{"id": 1.5}', '{"id": "--5"}', '{"id": "²"}'):
        identity = parse_user_cookie(raw)
        assert identity.user_id == 0, raw
        assert identity.authenticated is False, raw


def test_negative_string_id_is_accepted():
    assert parse_user_cookie('{"id": "-3"}').user_id == -3
