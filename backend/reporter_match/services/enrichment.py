from __future__ import annotations

import hashlib
import logging
import re
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)

WHITESPACE_PATTERN = re.compile(r"\s+")
NON_ALNUM_PATTERN = re.compile(r"[^a-z0-9]")


@dataclass(frozen=True)
class ContactInfo:
    email: str | None = None
    email_confidence: float | None = None
    linkedin_url: str | None = None
    twitter_handle: str | None = None


class ContactEnricher(Protocol):

    def enrich(self, name: str, outlet: str) -> ContactInfo:
        ...


class MockContactEnricher:
    """Plausible contact details derived from name and outlet alone.

    Stands in for a real enrichment API (RocketReach, Apollo, ...). The
    confidence is seeded from the name/outlet pair so repeated searches agree.
    """

    def enrich(self, name: str, outlet: str) -> ContactInfo:
        return ContactInfo(
            email=self._email(name, outlet),
            email_confidence=self._confidence(name, outlet),
            linkedin_url=f"https://linkedin.com/in/{WHITESPACE_PATTERN.sub('-', name.lower().strip())}",
            twitter_handle=f"@{WHITESPACE_PATTERN.sub('', name.lower())}",
        )

    @staticmethod
    def _email(name: str, outlet: str) -> str:
        parts = name.lower().split()
        first = parts[0] if parts else "unknown"
        last = parts[-1] if parts else "unknown"
        domain = NON_ALNUM_PATTERN.sub("", outlet.lower()) or "unknown"
        return f"{first}.{last}@{domain}.com"

    @staticmethod
    def _confidence(name: str, outlet: str) -> float:
        digest = hashlib.sha256(f"{name}|{outlet}".encode("utf-8")).digest()
        fraction = int.from_bytes(digest[:4], "big") / 0xFFFFFFFF
        return round(0.5 + fraction * 0.45, 2)


def enrich_contact(enricher: ContactEnricher, name: str, outlet: str) -> ContactInfo:
    """Enrich one reporter; a failing provider leaves that reporter's contact fields empty."""
    try:
        return enricher.enrich(name, outlet)
    except Exception:
        logger.warning("Contact enrichment failed for %s (%s)", name, outlet, exc_info=True)
        return ContactInfo()
