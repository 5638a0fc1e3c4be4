"""crashsim - correlated multi-asset price paths with crash injection."""

__version__ = "0.1.0"
