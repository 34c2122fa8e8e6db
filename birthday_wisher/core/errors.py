"""Error taxonomy for the daily birthday dispatch.

Run-level errors (``StorageUnavailable``, ``DispatchBusy``) escalate to the
caller of a manual trigger and to the logs on the timer path.
``DeliveryError`` is per-recipient and is always absorbed into the
``BatchResult`` by the dispatch runner.  ``ConfigurationInvalid`` is only
surfaced at startup or from the diagnostic endpoint.
"""
from __future__ import annotations


class BirthdayWisherError(Exception):
    """Base class for all service errors."""


class StorageUnavailable(BirthdayWisherError):
    """The people store could not be queried; the whole run is aborted."""


class DeliveryError(BirthdayWisherError):
    """A single notification could not be delivered."""

    def __init__(self, address: str, cause: BaseException | str) -> None:
        self.address = address
        self.cause = cause
        super().__init__(f"Failed to send birthday email to {address}: {cause}")


class ConfigurationInvalid(BirthdayWisherError):
    """The email transport is not usable with the current configuration."""


class DispatchBusy(BirthdayWisherError):
    """A dispatch run is already in progress."""
