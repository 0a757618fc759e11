"""
Error types raised while building and submitting relay transactions.

Every relay failure is a ``RelayError``. The subclass names the step that
failed so callers can tell a nonce lookup problem from a rejected
submission without parsing messages.
"""


class ConfigurationError(Exception):
    """Startup configuration is missing or unusable."""


class RelayError(Exception):
    """Base class for failures of a single relay call."""


class StateFetchError(RelayError):
    """Account or network state could not be read from the node."""


class NonceFetchError(StateFetchError):
    pass


class GasPriceFetchError(StateFetchError):
    pass


class MalformedInputError(RelayError):
    """Caller input could not be decoded under the strict decode policy."""


class EncodingError(RelayError):
    """The contract call could not be packed against the ABI."""


class SigningError(RelayError):
    pass


class SubmissionError(RelayError):
    """The node rejected or could not accept the signed transaction."""
