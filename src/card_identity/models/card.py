"""Pydantic models for card extraction records and merged entities."""

from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator
from pydantic.alias_generators import to_camel

from card_identity.normalize import (
    is_blank,
    normalize_email,
    normalize_logo,
    normalize_phone,
    normalize_website,
)

SINGULAR_FIELDS = ("full_name", "company", "job_title", "address")


class _CardFields(BaseModel):
    """Contact fields shared by raw records and consolidated entities."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    full_name: str = Field(default="", description="Person's full name")
    company: str = Field(default="", description="Company name")
    job_title: str = Field(default="", description="Job title or position")
    address: str = Field(default="", description="Postal address as printed")
    text: str = Field(default="", description="Raw OCR text")
    emails: list[str] = Field(default_factory=list, description="Email addresses")
    phones: list[str] = Field(default_factory=list, description="Phone numbers")
    websites: list[str] = Field(default_factory=list, description="Website URLs")
    logos: list[str] = Field(default_factory=list, description="Detected brand logos")
    confidence: float = Field(default=0.0, ge=0.0, description="Extraction confidence")

    @field_validator("full_name", "company", "job_title", "address", "text", mode="before")
    @classmethod
    def _coerce_str(cls, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, list):
            # LLM output sometimes wraps singular fields in a list
            return str(value[0]) if value else ""
        return str(value)

    @field_validator("emails", "phones", "websites", "logos", mode="before")
    @classmethod
    def _coerce_list(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, (str, int, float)):
            value = [value]
        return [str(item) for item in value if item is not None and str(item).strip()]

    @field_validator("confidence", mode="before")
    @classmethod
    def _coerce_confidence(cls, value: Any) -> Any:
        return 0.0 if value is None else value


class RawExtraction(_CardFields):
    """One OCR/LLM extraction result for a single card image."""

    model_config = ConfigDict(frozen=True)

    filename: str = Field(default="", description="Source image identifier")


class Fingerprint(BaseModel):
    """Normalized, comparable projection of a card record."""

    model_config = ConfigDict(frozen=True)

    full_name: str = ""
    company: str = ""
    job_title: str = ""
    text: str = ""
    emails: tuple[str, ...] = ()
    phones: tuple[str, ...] = ()
    websites: tuple[str, ...] = ()
    logos: tuple[str, ...] = ()

    @property
    def has_person(self) -> bool:
        """Whether the record names a person or carries personal contacts."""
        return bool(self.full_name or self.emails or self.phones)


class ConsolidatedEntity(_CardFields):
    """Contact record built by folding one or more extractions together."""

    filenames: list[str] = Field(default_factory=list, description="Source images")

    _confidences: list[float] = PrivateAttr(default_factory=list)

    @classmethod
    def from_record(cls, record: RawExtraction) -> "ConsolidatedEntity":
        """Start a new entity from a single extraction."""
        entity = cls()
        entity.absorb(record)
        return entity

    def absorb(
        self,
        record: RawExtraction,
        separator: str = "\n---\n",
        skip_contained_text: bool = True,
    ) -> None:
        """
        Fold an extraction into this entity in place.

        Repeatable fields are unioned, keeping the first spelling of each
        normalized value. Singular fields keep the first non-blank value.
        Text is appended unless the entity already contains it and
        ``skip_contained_text`` is set.

        Args:
            record: Extraction to fold in.
            separator: Joiner placed between texts of different records.
            skip_contained_text: Drop a text the entity already contains.
        """
        for name in SINGULAR_FIELDS:
            incoming = getattr(record, name)
            if is_blank(getattr(self, name)) and not is_blank(incoming):
                setattr(self, name, incoming.strip())

        self.emails = _union(self.emails, record.emails, normalize_email)
        self.phones = _union(self.phones, record.phones, normalize_phone)
        self.websites = _union(self.websites, record.websites, normalize_website)
        self.logos = _union(self.logos, record.logos, normalize_logo)

        if record.text and not (skip_contained_text and record.text in self.text):
            self.text = separator.join(t for t in (self.text, record.text) if t)

        if record.filename:
            self.filenames.append(record.filename)

        if record.confidence > 0:
            if not self._confidences and self.confidence > 0:
                # Entity was built directly rather than through absorb()
                self._confidences.append(self.confidence)
            self._confidences.append(record.confidence)
            self.confidence = round(sum(self._confidences) / len(self._confidences), 2)


def _union(existing: list[str], incoming: list[str], key: Callable[[str], str]) -> list[str]:
    """Order-preserving union, deduplicated on ``key(value)``."""
    seen: set[str] = set()
    result: list[str] = []
    for value in [*existing, *incoming]:
        k = key(value)
        if not k or k in seen:
            continue
        seen.add(k)
        result.append(value)
    return result


class MatchScore(BaseModel):
    """Weighted similarity between two records."""

    model_config = ConfigDict(frozen=True)

    score: float = Field(default=0.0, description="Sum of fired signal weights")
    signals: tuple[str, ...] = Field(default=(), description="Names of fired signals")

    def has_signal(self, name: str) -> bool:
        """Whether a signal fired, ignoring any ``(detail)`` suffix."""
        return any(s.split("(", 1)[0] == name for s in self.signals)


class ResolutionMetadata(BaseModel):
    """Metadata about one resolution run."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    strategy: str = Field(description="Merge strategy used")
    input_count: int = Field(description="Number of input records")
    output_count: int = Field(description="Number of consolidated entities")
    processing_time_ms: float = Field(description="Total processing time in ms")


class ResolutionResult(BaseModel):
    """Consolidated entities for a batch plus run metadata."""

    entities: list[ConsolidatedEntity] = Field(default_factory=list)
    metadata: ResolutionMetadata
