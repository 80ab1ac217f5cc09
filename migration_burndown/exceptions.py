"""Exception hierarchy for the burndown analytics package."""


class BurndownError(Exception):
    """Base exception for burndown errors."""

    pass


class BurndownDataError(BurndownError):
    """Raw burndown data could not be loaded."""

    pass
