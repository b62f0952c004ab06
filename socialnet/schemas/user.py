"""User Schemas — public profile views and the profile edit body.

Invariants:
    - Contact details (email, phone) appear only in MeResponse
    - Follow lists are emitted only when the relation was loaded, else None
    - UserUpdate: an omitted field is left unchanged, an empty string unsets it
"""

from pydantic import BaseModel, Field

from socialnet.core.profile_update import ProfileUpdate
from socialnet.db.relations import is_loaded
from socialnet.models.user import User


class UserSummary(BaseModel):
    user_id: int
    username: str
    display_name: str
    picture: str

    @classmethod
    def from_user(cls, user: User) -> "UserSummary":
        return cls(
            user_id=user.user_id,
            username=user.username,
            display_name=user.display_name,
            picture=user.picture,
        )


class UserResponse(UserSummary):
    chosen_name: str | None = None
    banner: str | None = None
    bio: str | None = None
    follower_ids: list[int] | None = None
    following_ids: list[int] | None = None

    @classmethod
    def _fields_of(cls, user: User) -> dict:
        return dict(
            user_id=user.user_id,
            username=user.username,
            display_name=user.display_name,
            picture=user.picture,
            chosen_name=user.chosen_name,
            banner=user.banner,
            bio=user.bio,
            follower_ids=(
                [u.user_id for u in user.followers]
                if is_loaded(user, "followers") else None
            ),
            following_ids=(
                [u.user_id for u in user.following]
                if is_loaded(user, "following") else None
            ),
        )

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(**cls._fields_of(user))


class MeResponse(UserResponse):
    """The authenticated user's own view, including login identifiers."""
    email_address: str
    phone_number: str
    liked_post_ids: list[int] | None = None

    @classmethod
    def from_user(cls, user: User) -> "MeResponse":
        return cls(
            **cls._fields_of(user),
            email_address=user.email_address,
            phone_number=user.phone_number,
            liked_post_ids=(
                [p.post_id for p in user.liked_posts]
                if is_loaded(user, "liked_posts") else None
            ),
        )


class UserUpdate(BaseModel):
    display_name: str | None = Field(None, max_length=50)
    bio: str | None = Field(None, max_length=1000)
    picture: str | None = Field(None, max_length=2048)
    banner: str | None = Field(None, max_length=2048)

    def to_update(self) -> ProfileUpdate:
        return ProfileUpdate(
            display_name=self.display_name,
            bio=self.bio,
            picture=self.picture,
            banner=self.banner,
        )


class FollowResponse(BaseModel):
    changed: bool
    following: bool
