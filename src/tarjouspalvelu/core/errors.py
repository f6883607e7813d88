"""
Error taxonomy for portal operations.

Every error is terminal for the operation that raised it. Nothing here is
retried; the first failure aborts the whole higher-level call.
"""

from __future__ import annotations


class TarjouspalveluError(Exception):
    """Base exception for portal errors."""

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


# =============================================================================
# Session errors
# =============================================================================


class InvalidSlug(TarjouspalveluError):
    """The company slug redirected to the generic index page."""
    pass


class SessionAcquisitionFailed(TarjouspalveluError):
    """The slug redirect did not carry the expected id, uuid or cookie."""
    pass


class BadSessionOrExpired(TarjouspalveluError):
    """A page answered with a redirect where content was expected."""
    pass


class LoginFailed(TarjouspalveluError):
    """The login form did not redirect, or no session token was issued."""
    pass


class LanguageMismatch(TarjouspalveluError):
    """The portal confirmed a different culture than the one requested."""

    def __init__(self, message: str, requested: str, confirmed: str | None):
        super().__init__(message)
        self.requested = requested
        self.confirmed = confirmed


class PortalRequestFailed(TarjouspalveluError):
    """The portal answered with an unexpected status code."""
    pass


# =============================================================================
# Parsing errors
# =============================================================================


class LocaleNotFound(TarjouspalveluError):
    """No known culture marker was found in the page."""
    pass


class DateParseError(TarjouspalveluError):
    """A date did not match the layout of its locale."""
    pass


class UnrecognizedBooleanToken(TarjouspalveluError):
    """A yes/no value was not one of the known localized tokens."""
    pass


class FlagParseError(TarjouspalveluError):
    """An icon filename matched neither flag naming convention."""
    pass


class RequiredFieldMissing(TarjouspalveluError):
    """A structural assumption about the page markup broke."""

    def __init__(self, field: str, message: str | None = None):
        super().__init__(message or f"Failed getting {field}, has the page layout changed?")
        self.field = field


# =============================================================================
# Tender errors
# =============================================================================


class NoTenderInProgress(TarjouspalveluError):
    """The tenders page has no tender in progress for the notice."""
    pass


class TenderRemovalFailed(TarjouspalveluError):
    """The portal rejected the removal of a tender in progress."""
    pass
