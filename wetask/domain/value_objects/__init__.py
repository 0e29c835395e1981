"""Value objects shared by the issuer and the session client."""

from .token_pair import TokenPair

__all__ = ["TokenPair"]
