"""Tests for registration email domain checks."""

from __future__ import annotations

import dns.exception
import pytest

from utils.email_validation import validate_email_domain


def test_accepts_domain_with_mx(app):
    with app.app_context():
        assert validate_email_domain("buyer@example.com") == (True, None)


@pytest.mark.parametrize(
    "email",
    ["no-at-sign", "user@", "user@localhost", "user@bad_domain.com"],
)
def test_rejects_malformed_domains(app, email):
    with app.app_context():
        valid, reason = validate_email_domain(email)
    assert valid is False
    assert reason


def test_rejects_disposable_domain(app):
    with app.app_context():
        valid, reason = validate_email_domain("x@yopmail.com")
    assert valid is False
    assert "Disposable" in reason


def test_lookup_failure_counts_as_invalid(app, monkeypatch):
    def _fail(domain, timeout):
        raise dns.exception.DNSException("no such domain")

    monkeypatch.setattr("utils.email_validation.lookup_mx_hosts", _fail)
    with app.app_context():
        valid, reason = validate_email_domain("x@missing-domain.org")
    assert valid is False
    assert reason == "Email domain does not exist"


def test_timeout_counts_as_invalid(app, monkeypatch):
    def _timeout(domain, timeout):
        raise dns.exception.Timeout()

    monkeypatch.setattr("utils.email_validation.lookup_mx_hosts", _timeout)
    with app.app_context():
        valid, _ = validate_email_domain("x@slow-domain.org")
    assert valid is False


def test_null_mx_counts_as_invalid(app, monkeypatch):
    monkeypatch.setattr("utils.email_validation.lookup_mx_hosts", lambda domain, timeout: [""])
    with app.app_context():
        valid, reason = validate_email_domain("x@no-mail.org")
    assert valid is False
    assert reason == "Email domain does not accept emails"
