"""Exception hierarchy for the simulation engine."""


class BlitzMarketsError(Exception):
    """Base class for all package errors."""


class InvalidProposalError(BlitzMarketsError, ValueError):
    """A trade proposal violates stake/odds bounds or names an unknown bot.

    Raised at construction time so a bad proposal never reaches the ledger.
    """
