"""Best-effort email domain checks used at registration."""

from __future__ import annotations

import re

import dns.exception
import dns.resolver
from flask import current_app


_DOMAIN_RE = re.compile(
    r"^(?=.{4,253}$)([a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?\.)+[a-z]{2,63}$"
)


def lookup_mx_hosts(domain: str, timeout: float) -> list[str]:
    """Return the MX hosts for ``domain``; raises ``dns.exception.DNSException``."""

    answer = dns.resolver.resolve(domain, "MX", lifetime=timeout)
    return [str(record.exchange).rstrip(".") for record in answer]


def validate_email_domain(email: str) -> tuple[bool, str | None]:
    """Check that ``email`` has a plausible domain that accepts mail.

    Returns ``(True, None)`` or ``(False, reason)``. Lookup failures of any
    kind count as an invalid domain.
    """

    logger = current_app.logger
    local, _, domain = email.rpartition("@")
    domain = domain.strip().lower()
    if not local or not domain:
        return False, "Invalid email format"

    if not _DOMAIN_RE.match(domain):
        return False, "Please use a valid email domain"

    if domain in current_app.config.get("DISPOSABLE_EMAIL_DOMAINS", ()):
        logger.info("Rejected disposable email domain %s", domain)
        return False, "Disposable email addresses are not allowed"

    timeout = float(current_app.config.get("MX_LOOKUP_TIMEOUT", 5))
    try:
        hosts = lookup_mx_hosts(domain, timeout)
    except dns.exception.DNSException as exc:
        logger.warning("MX lookup failed for %s: %s", domain, exc)
        return False, "Email domain does not exist"

    hosts = [host for host in hosts if host]
    if not hosts:
        return False, "Email domain does not accept emails"
    return True, None
