"""Market error taxonomy."""

from __future__ import annotations


class LmsrError(Exception):
    """Base for recoverable market errors. The market is unchanged when one is raised."""


class InsufficientShares(LmsrError):
    """Selling more than was issued, or paying out an outcome with no issued shares."""


class Resolved(LmsrError):
    """Trade or re-resolution attempted on a resolved market."""


class NegativeMarketCapitalization(LmsrError):
    """Sell proceeds would drive the market's net collected funds below zero."""


class UnknownOutcome(LookupError):
    """Outcome is not a member of the market's outcome set.

    This is a caller contract violation, not a market condition, so it does not
    derive from LmsrError and should not be handled alongside market errors.
    """

    def __init__(self, outcome: object) -> None:
        super().__init__(f"Unknown outcome: {outcome!r}")
        self.outcome = outcome
