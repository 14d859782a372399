"""Boolean identity rules deciding whether two fingerprints belong together."""

import logging

from card_identity.models.card import Fingerprint

logger = logging.getLogger(__name__)

# Shorter company fragments are too generic to count as a containment match
MIN_COMPANY_FRAGMENT = 3


def shares(a: tuple[str, ...], b: tuple[str, ...]) -> bool:
    """Whether two identifier tuples have any value in common."""
    return not set(a).isdisjoint(b)


def is_same_person(a: Fingerprint, b: Fingerprint) -> bool:
    """
    Decide whether two fingerprints describe the same person.

    Rules are checked strongest first and the first hit wins: a shared
    email, phone or website, or an equal name together with an equal
    company.
    """
    if shares(a.emails, b.emails):
        logger.debug("Same person: shared email")
        return True
    if shares(a.phones, b.phones):
        logger.debug("Same person: shared phone")
        return True
    if shares(a.websites, b.websites):
        logger.debug("Same person: shared website")
        return True
    if a.full_name and a.full_name == b.full_name and a.company and a.company == b.company:
        logger.debug("Same person: name and company match")
        return True
    return False


def is_front_back_pair(a: Fingerprint, b: Fingerprint) -> bool:
    """
    Decide whether two fingerprints are opposite faces of one card.

    Catches a company-only back side next to a person-only front side,
    which ``is_same_person`` cannot see.
    """
    if a.company and a.company == b.company:
        logger.debug("Front/back pair: same company")
        return True

    a_company_only = not a.has_person and bool(a.company)
    b_company_only = not b.has_person and bool(b.company)
    if (a_company_only and b.has_person and not b.company) or (
        b_company_only and a.has_person and not a.company
    ):
        logger.debug("Front/back pair: company side complements person side")
        return True

    if a.company and b.company:
        if (b.company in a.company and len(b.company) > MIN_COMPANY_FRAGMENT) or (
            a.company in b.company and len(a.company) > MIN_COMPANY_FRAGMENT
        ):
            logger.debug("Front/back pair: companies overlap (%r, %r)", a.company, b.company)
            return True

    return False


def matches(a: Fingerprint, b: Fingerprint) -> bool:
    """Whether two fingerprints should be folded into one entity."""
    return is_same_person(a, b) or is_front_back_pair(a, b)
