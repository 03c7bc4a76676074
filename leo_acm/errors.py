"""Errors raised by the ACM selector.

Only malformed configuration is fatal. Invalid C/No samples and deep fades are
absorbed by the engine and reported through the ``forced`` flag of a decision.
"""


class ConfigurationError(ValueError):
    """Raised when ACM parameters cannot produce a valid candidate grid."""
