"""driveaudit - Async client for filing and querying driving-behaviour reports on a ledger."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("driveaudit")
except PackageNotFoundError:
    __version__ = "0+local"
from driveaudit.app import DriveAuditApp
from driveaudit.codec import (
    Behavior,
    behavior_label,
    canonical_tag,
    decode_coordinate,
    encode_coordinate,
)
from driveaudit.config import DriveAuditConfig
from driveaudit.exceptions import (
    ArtifactError,
    DriveAuditConfigError,
    DriveAuditError,
    GeolocationUnavailableError,
    LedgerNetworkError,
    LedgerUnavailableError,
    TransactionRejectedError,
)
from driveaudit.flows import FlowState, ReportHistoryFlow, ReportSubmissionFlow, ScoreFlow
from driveaudit.geolocation import GeoCapture, PositionSource, SessionLocation, StaticPositionSource
from driveaudit.ledger import LedgerBackend, LedgerClient, LedgerContract
from driveaudit.models import (
    DriverScore,
    GeoFix,
    ReportBatch,
    ReportRecord,
    ReportRow,
    SeverityBand,
    Tag,
    TransactionResult,
    classify_score,
)
from driveaudit.view import FormInput, ViewState

__all__ = [
    "__version__",
    "ArtifactError",
    "Behavior",
    "DriveAuditApp",
    "DriveAuditConfig",
    "DriveAuditConfigError",
    "DriveAuditError",
    "DriverScore",
    "FlowState",
    "FormInput",
    "GeoCapture",
    "GeoFix",
    "GeolocationUnavailableError",
    "LedgerBackend",
    "LedgerClient",
    "LedgerContract",
    "LedgerNetworkError",
    "LedgerUnavailableError",
    "PositionSource",
    "ReportBatch",
    "ReportHistoryFlow",
    "ReportRecord",
    "ReportRow",
    "ReportSubmissionFlow",
    "ScoreFlow",
    "SessionLocation",
    "SeverityBand",
    "StaticPositionSource",
    "Tag",
    "TransactionRejectedError",
    "TransactionResult",
    "ViewState",
    "behavior_label",
    "canonical_tag",
    "classify_score",
    "decode_coordinate",
    "encode_coordinate",
]
