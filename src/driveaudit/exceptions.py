"""Custom exception hierarchy for driveaudit."""

from __future__ import annotations


class DriveAuditError(Exception):
    """Base exception for all driveaudit errors."""


class DriveAuditConfigError(DriveAuditError):
    """Invalid or missing configuration."""


class LedgerUnavailableError(DriveAuditError):
    """No provider, account or deployed contract is available."""


class ArtifactError(LedgerUnavailableError):
    """Contract artifact could not be loaded or has no address for the network."""


class TransactionRejectedError(DriveAuditError):
    """The ledger declined a state-mutating call."""

    def __init__(self, message: str, *, tx_hash: str | None = None) -> None:
        self.tx_hash = tx_hash
        super().__init__(message)


class LedgerNetworkError(DriveAuditError):
    """Transport failure (or malformed reply) on a ledger call."""

    def __init__(self, message: str, *, operation: str = "") -> None:
        self.operation = operation
        super().__init__(message)


class GeolocationUnavailableError(DriveAuditError):
    """Device position capability is absent or was denied."""
