# prompt_relay/core/errors.py
"""
Relay error taxonomy.

Every error raised on purpose by the relay derives from RelayError and carries
the HTTP status the dispatcher should answer with. Transport failures coming
from the provider SDKs are left as-is and reported as 500 by the dispatcher.
"""


class RelayError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(RelayError):
    """Required server configuration (the provider credential) is missing."""
    status_code = 500


class InvalidRequestError(RelayError):
    """Unknown envelope type or malformed payload."""
    status_code = 400


class GenerationError(RelayError):
    """The provider answered, but not with something usable."""
    status_code = 500
