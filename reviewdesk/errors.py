"""Exception hierarchy for catalog loading and review submission."""


class ReviewDeskError(Exception):
    """Base class for all reviewdesk errors."""


class CatalogError(ReviewDeskError):
    """The question catalog could not be loaded."""


class MalformedCatalogError(CatalogError):
    """The catalog payload is unparseable or missing required fields."""


class SubmitError(ReviewDeskError):
    """A submission to the persistence backend failed.

    ``message`` is what ends up in the screen's status line.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class BackendUnavailableError(SubmitError):
    """The backend could not be reached (connectivity, auth, timeout)."""


class WriteFailedError(SubmitError):
    """The backend was reached but rejected the bulk write."""
