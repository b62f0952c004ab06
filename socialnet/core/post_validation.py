"""Post Validation — explicit content rules checked before any insert.

Invariants:
    - A post declares media, text, or both; never neither
    - A post with media declares its MIME type
    - Blank strings count as unset
    - Pure functions: no IO, no DB

Design Decisions:
    - Structured ValidationResult over exceptions: callers decide whether to raise
      (HTTP edge) or just report (service layer)
"""

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class ValidationResult:
    """Pass/fail with the offending field and a human-readable reason."""
    ok: bool
    reason: str | None = None
    field: str | None = None

    @classmethod
    def passed(cls) -> "ValidationResult":
        return cls(ok=True)

    @classmethod
    def failed(cls, reason: str, field: str | None = None) -> "ValidationResult":
        return cls(ok=False, reason=reason, field=field)


def _is_set(value: str | None) -> bool:
    return value is not None and value.strip() != ""


def validate_content_presence(
    content_location: str | None, text: str | None,
) -> ValidationResult:
    """At least one of media or text."""
    if not _is_set(content_location) and not _is_set(text):
        return ValidationResult.failed(
            "A post must declare media, text, or both.", "text",
        )
    return ValidationResult.passed()


def validate_post_content(
    content_location: str | None,
    content_type: str | None,
    text: str | None,
) -> ValidationResult:
    """At least one of media or text; media requires a content type."""
    presence = validate_content_presence(content_location, text)
    if not presence.ok:
        return presence
    if _is_set(content_location) and not _is_set(content_type):
        return ValidationResult.failed(
            "A post with media must declare its content type.", "content_type",
        )
    return ValidationResult.passed()


def validate_media_type(
    content_type: str | None, allowed: Iterable[str],
) -> ValidationResult:
    if content_type is None:
        return ValidationResult.failed(
            "Media content type could not be determined.", "content_location",
        )
    if content_type.lower() not in {a.lower() for a in allowed}:
        return ValidationResult.failed(
            f"Media type '{content_type}' is not allowed.", "content_location",
        )
    return ValidationResult.passed()


def normalize_optional_text(value: str) -> str | None:
    """Profile edit convention: an empty or whitespace-only value unsets the field."""
    return None if value.strip() == "" else value
