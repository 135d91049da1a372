# yadokari/errors.py
"""
Error taxonomy.

Only AuthenticationFailed ever reaches the webhook caller. Everything else is
raised inside the background workflow, logged there and ends that run.
"""


class YadokariError(Exception):
    """Base class for every error raised by this package."""


class AuthenticationFailed(YadokariError):
    """Inbound request carried the wrong shared secret."""


class FetchError(YadokariError):
    """Listing source could not deliver a snapshot."""


class SourceUnavailable(FetchError):
    """Transport failure, timeout or non-success status from the listing source."""


class MalformedResponse(FetchError):
    """Listing source answered with a body that is not a list of listings."""


class PersistenceFailure(YadokariError):
    """Reading or replacing the persisted snapshot failed."""


class DispatchError(YadokariError):
    """Chat platform rejected or never received the notification."""
