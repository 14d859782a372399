"""Tunable weights and thresholds for the pairing scorer."""

import re
from functools import cached_property
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_ADDRESS_KEYWORDS = (
    "mumbai",
    "pune",
    "delhi",
    "bangalore",
    "kolkata",
    "chennai",
    "india",
    "road",
    "street",
    "avenue",
    "industrial",
    "area",
    "village",
    "sector",
    "block",
    "phase",
)

DEFAULT_ROLE_PATTERN = r"(director|founder|ceo|cto|manager|president|vp|executive|partner)"
DEFAULT_COMPANY_PATTERN = (
    r"(pvt|private|ltd|llp|inc|solutions|foods|tech|company|enterprises|corporation|group)"
)


class PairingConfig(BaseModel):
    """Signal weights and merge thresholds for ``pair_cards``."""

    model_config = ConfigDict(frozen=True)

    email_weight: float = Field(default=1.0, description="Shared email")
    phone_weight: float = Field(default=1.0, description="Shared phone")
    website_weight: float = Field(default=0.8, description="Shared website")
    logo_weight: float = Field(default=0.5, description="Shared detected logo")
    address_keyword_weight: float = Field(
        default=0.1, description="Per address keyword present in both texts"
    )
    address_cap: float = Field(default=0.3, description="Maximum address contribution")
    role_company_weight: float = Field(
        default=0.4, description="Role in one text, company suffix in the other"
    )
    text_overlap_factor: float = Field(
        default=0.5, description="Multiplier on the shared long-word ratio"
    )
    text_overlap_cap: float = Field(default=0.3, description="Maximum text overlap contribution")
    min_shared_words: int = Field(default=2, ge=1, description="Shared words needed to count")
    min_word_length: int = Field(default=4, ge=1, description="Shortest word considered")

    merge_threshold: float = Field(default=1.2, description="Score that merges on its own")
    logo_threshold: float = Field(
        default=0.7, description="Score that merges when a logo matched"
    )

    address_keywords: tuple[str, ...] = Field(default=DEFAULT_ADDRESS_KEYWORDS)
    role_pattern: str = Field(default=DEFAULT_ROLE_PATTERN)
    company_pattern: str = Field(default=DEFAULT_COMPANY_PATTERN)

    @field_validator("address_keywords")
    @classmethod
    def _lower_keywords(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        # Keywords are matched against lower-cased OCR text
        return tuple(k.strip().lower() for k in value if k.strip())

    @field_validator("role_pattern", "company_pattern")
    @classmethod
    def _check_pattern(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as e:
            raise ValueError(f"Invalid regular expression {value!r}: {e}") from e
        return value

    @cached_property
    def role_regex(self) -> re.Pattern[str]:
        return re.compile(self.role_pattern, re.IGNORECASE)

    @cached_property
    def company_regex(self) -> re.Pattern[str]:
        return re.compile(self.company_pattern, re.IGNORECASE)

    @classmethod
    def from_file(cls, path: str | Path) -> "PairingConfig":
        """
        Load a config from a JSON file; omitted keys keep their defaults.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file is not valid config JSON.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        return cls.model_validate_json(path.read_text(encoding="utf-8"))
