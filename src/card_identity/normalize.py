"""Field normalizers shared by fingerprinting and entity merging."""

import re

_NON_ALNUM = re.compile(r"[^a-z0-9]")
_NON_DIGIT = re.compile(r"\D")

# Phone numbers are compared on their trailing digits so a number written
# with or without a country code still matches.
PHONE_DIGITS = 10

# Value the LLM collaborator emits for fields it could not read
PLACEHOLDER = "n/a"


def is_blank(value: str) -> bool:
    """Return True for empty strings and the "N/A" placeholder."""
    stripped = value.strip()
    return not stripped or stripped.lower() == PLACEHOLDER


def normalize_name(value: str) -> str:
    """Lower-case and trim a free-form singular field (name, title)."""
    return "" if is_blank(value) else value.strip().lower()


def normalize_company(value: str) -> str:
    """Reduce a company name to lower-case alphanumerics.

    "Acme, Inc." and "ACME INC" both become "acmeinc".
    """
    return "" if is_blank(value) else _NON_ALNUM.sub("", value.lower())


def normalize_email(value: str) -> str:
    return value.strip().lower()


def normalize_phone(value: str) -> str:
    """Keep only digits, then at most the last ``PHONE_DIGITS`` of them."""
    digits = _NON_DIGIT.sub("", value)
    return digits[-PHONE_DIGITS:]


def normalize_website(value: str) -> str:
    return value.strip().lower()


def normalize_logo(value: str) -> str:
    return value.strip().lower()
