"""Client configuration for driveaudit."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from typing import Any

from driveaudit.exceptions import DriveAuditConfigError

#: Local development node used when no provider URL is configured.
DEFAULT_PROVIDER_URL = "http://localhost:7546"

#: Compiled contract artifact (truffle JSON) served next to the client.
DEFAULT_ARTIFACT = "DoonTaggle.json"


def _env_float(env: Mapping[str, str], key: str) -> float | None:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return None
    try:
        return float(raw)
    except ValueError as exc:
        raise DriveAuditConfigError(f"{key} must be numeric, got {raw!r}") from exc


@dataclasses.dataclass(frozen=True)
class DriveAuditConfig:
    """Client configuration.

    Parameters
    ----------
    provider_url : str
        JSON-RPC endpoint of the ledger node.
    artifact : str
        Path or http(s) URL of the compiled contract artifact. The artifact
        must carry ``abi`` and a ``networks`` map of deployed addresses.
    network_id : str or None
        Network id used to pick the deployed address. ``None`` asks the
        node for its ``net_version``.
    receipt_timeout : float
        Seconds to wait for a filed report to be mined.
    call_timeout : float or None
        Optional upper bound for every ledger round trip. ``None`` waits
        indefinitely.
    latitude : float or None
        Static device latitude in decimal degrees.
    longitude : float or None
        Static device longitude in decimal degrees.
    """

    provider_url: str = DEFAULT_PROVIDER_URL
    artifact: str = DEFAULT_ARTIFACT
    network_id: str | None = None
    receipt_timeout: float = 120.0
    call_timeout: float | None = None
    latitude: float | None = None
    longitude: float | None = None

    @property
    def has_static_position(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @classmethod
    def from_env(cls, **overrides: Any) -> DriveAuditConfig:
        """Create configuration from ``DRIVEAUDIT_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "DRIVEAUDIT_PROVIDER_URL": "provider_url",
            "DRIVEAUDIT_ARTIFACT": "artifact",
            "DRIVEAUDIT_NETWORK_ID": "network_id",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None and val.strip():
                config_kwargs[field_name] = val.strip()

        _ENV_NUMERIC_MAP = {
            "DRIVEAUDIT_RECEIPT_TIMEOUT": "receipt_timeout",
            "DRIVEAUDIT_CALL_TIMEOUT": "call_timeout",
            "DRIVEAUDIT_LATITUDE": "latitude",
            "DRIVEAUDIT_LONGITUDE": "longitude",
        }
        for env_key, field_name in _ENV_NUMERIC_MAP.items():
            if field_name in overrides:
                continue
            parsed = _env_float(env, env_key)
            if parsed is not None:
                config_kwargs[field_name] = parsed

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
