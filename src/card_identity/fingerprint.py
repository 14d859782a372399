"""Fingerprint extraction: normalized views of card records for matching."""

from typing import Callable, Iterable

from card_identity.models.card import ConsolidatedEntity, Fingerprint, RawExtraction
from card_identity.normalize import (
    normalize_company,
    normalize_email,
    normalize_logo,
    normalize_name,
    normalize_phone,
    normalize_website,
)


def fingerprint(record: RawExtraction | ConsolidatedEntity) -> Fingerprint:
    """
    Build the comparable fingerprint of a record.

    Entries of repeatable fields that normalize to an empty string are
    dropped, so two records never match on a blank identifier.

    Args:
        record: Raw extraction or an entity being built from several.

    Returns:
        Fingerprint of the record.
    """
    return Fingerprint(
        full_name=normalize_name(record.full_name),
        company=normalize_company(record.company),
        job_title=normalize_name(record.job_title),
        text=record.text.lower(),
        emails=_normalize_all(record.emails, normalize_email),
        phones=_normalize_all(record.phones, normalize_phone),
        websites=_normalize_all(record.websites, normalize_website),
        logos=_normalize_all(record.logos, normalize_logo),
    )


def _normalize_all(values: Iterable[str], normalize: Callable[[str], str]) -> tuple[str, ...]:
    normalized = (normalize(v) for v in values)
    return tuple(v for v in normalized if v)
