from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class UserIdentity:
    """Who an access token belongs to, as returned by token validation."""

    id: int
    email: str
    name: str

    @classmethod
    def from_user(cls, user) -> "UserIdentity":
        return cls(id=user.id, email=user.email, name=user.name)
