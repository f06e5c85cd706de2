from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from fff.engine import FetchSuccess, SaveReason, TransportFailure, is_html, should_save


def _success(status: int = 200, body: bytes = b"data", content_type: str = "text/plain") -> FetchSuccess:
    return FetchSuccess(
        url="http://a.test",
        status=status,
        headers=(("content-type", content_type),),
        body=body,
        elapsed=0.01,
    )


def test_transport_failure_is_never_saved(sample_config) -> None:
    decision = should_save(TransportFailure(url="http://a.test", reason="dns"), sample_config(save_all=True))
    assert not decision
    assert decision.reason is SaveReason.TRANSPORT_ERROR


def test_nothing_configured_means_no_save(sample_config) -> None:
    decision = should_save(_success(), sample_config())
    assert not decision
    assert decision.reason is SaveReason.NO_MATCH


@pytest.mark.parametrize(
    ("overrides", "outcome", "reason"),
    [
        ({"save_all": True}, _success(status=404), SaveReason.SAVE_ALL),
        ({"save_status": [200, 302]}, _success(status=302), SaveReason.STATUS_MATCH),
        ({"match_string": "Welcome"}, _success(body=b"Welcome to X"), SaveReason.BODY_MATCH),
        ({"save_status": [500], "match_string": "ok"}, _success(body=b"all ok"), SaveReason.BODY_MATCH),
    ],
)
def test_positive_rules_are_or_ed(sample_config, overrides, outcome, reason) -> None:
    decision = should_save(outcome, sample_config(**overrides))
    assert decision
    assert decision.reason is reason


def test_match_string_miss(sample_config) -> None:
    decision = should_save(_success(body=b"Goodbye"), sample_config(match_string="Welcome"))
    assert not decision


def test_status_not_in_save_status(sample_config) -> None:
    assert not should_save(_success(status=404), sample_config(save_status=[200]))


def test_ignore_html_vetoes_save_all(sample_config) -> None:
    outcome = _success(body=b"<p>hi</p>", content_type="text/html; charset=utf-8")
    decision = should_save(outcome, sample_config(save_all=True, ignore_html=True))
    assert not decision
    assert decision.reason is SaveReason.IGNORED_HTML


def test_ignore_empty_vetoes_status_match(sample_config) -> None:
    decision = should_save(_success(body=b""), sample_config(save_status=[200], ignore_empty=True))
    assert not decision
    assert decision.reason is SaveReason.IGNORED_EMPTY


def test_ignore_rules_never_create_a_save(sample_config) -> None:
    decision = should_save(_success(body=b"plain"), sample_config(ignore_html=True, ignore_empty=True))
    assert not decision
    assert decision.reason is SaveReason.NO_MATCH


@pytest.mark.parametrize(
    ("headers", "body", "expected"),
    [
        ((("Content-Type", "text/html"),), b"", True),
        ((("Content-Type", "application/xhtml+xml"),), b"", True),
        ((("Content-Type", "application/json"),), b"{}", False),
        ((), b"<!doctype html><HTML lang=en>", True),
        ((), b"just text", False),
    ],
)
def test_html_detection(headers, body, expected) -> None:
    assert is_html(headers, body) is expected


def test_should_save_is_deterministic_across_threads(sample_config) -> None:
    config = sample_config(save_status=[200], match_string="needle", ignore_html=True)
    outcomes = [
        _success(status=200),
        _success(status=404, body=b"hay needle hay"),
        _success(status=404, body=b"<html>needle</html>"),
        _success(status=500),
    ]
    expected = [should_save(outcome, config) for outcome in outcomes]

    with ThreadPoolExecutor(max_workers=8) as executor:
        rounds = list(executor.map(lambda _: [should_save(o, config) for o in outcomes], range(200)))

    assert all(result == expected for result in rounds)
    assert [decision.save for decision in expected] == [True, True, False, False]
