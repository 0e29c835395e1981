from __future__ import annotations

"""The access/refresh token pair exchanged between issuer and client."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class TokenPair(BaseModel):
    """An access token together with the refresh token minted alongside it.

    The pair is immutable: a session moves from one pair to the next by
    replacing the whole object, so no reader can ever observe the access
    token of one pair next to the refresh token of another. On the wire the
    fields are ``accessToken`` and ``refreshToken``.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    access_token: str = Field(..., min_length=1)
    refresh_token: str = Field(..., min_length=1)

    def to_wire(self) -> dict:
        """Serialise with the camelCase keys used by the HTTP API."""
        return self.model_dump(by_alias=True)

    def __repr__(self) -> str:
        # Tokens are credentials; keep them out of reprs and tracebacks.
        return "TokenPair(access_token=***, refresh_token=***)"
