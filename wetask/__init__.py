"""WeTask auth issuer and session client."""

__version__ = "0.1.0"
