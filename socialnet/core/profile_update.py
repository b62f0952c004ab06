"""Profile Update — pure mutation of a user's editable profile fields.

Invariants:
    - None means "leave unchanged"
    - Blank display name, bio or banner unsets the field
    - Blank picture resets to the instance default image (picture is never null)
"""

from dataclasses import dataclass
from typing import Any

from socialnet.core.post_validation import normalize_optional_text


@dataclass(frozen=True)
class ProfileUpdate:
    display_name: str | None = None
    bio: str | None = None
    picture: str | None = None
    banner: str | None = None

    @property
    def is_empty(self) -> bool:
        return all(
            v is None for v in (self.display_name, self.bio, self.picture, self.banner)
        )


def apply_profile_update(user: Any, update: ProfileUpdate, default_picture: str) -> None:
    if update.display_name is not None:
        user.chosen_name = normalize_optional_text(update.display_name)
    if update.bio is not None:
        user.bio = normalize_optional_text(update.bio)
    if update.banner is not None:
        user.banner = normalize_optional_text(update.banner)
    if update.picture is not None:
        user.picture = normalize_optional_text(update.picture) or default_picture
