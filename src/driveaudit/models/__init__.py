"""Data models for ledger records and client state."""

from driveaudit.models._base import LedgerModel, LedgerTimestamp, parse_ledger_timestamp
from driveaudit.models.location import GeoFix
from driveaudit.models.report import ReportBatch, ReportRecord, ReportRow
from driveaudit.models.score import DriverScore, SeverityBand, classify_score
from driveaudit.models.tag import Tag
from driveaudit.models.transaction import TransactionResult

__all__ = [
    "DriverScore",
    "GeoFix",
    "LedgerModel",
    "LedgerTimestamp",
    "ReportBatch",
    "ReportRecord",
    "ReportRow",
    "SeverityBand",
    "Tag",
    "TransactionResult",
    "classify_score",
    "parse_ledger_timestamp",
]
