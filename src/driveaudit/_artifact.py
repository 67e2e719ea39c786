"""Compiled contract artifact loading.

The artifact is the truffle-style JSON emitted when the contract is
compiled and migrated: an ``abi`` list plus a ``networks`` map from
network id to the deployed ``address``.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

import aiohttp
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from driveaudit.exceptions import ArtifactError

_logger = logging.getLogger(__name__)


class NetworkDeployment(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    address: str


class ContractArtifact(BaseModel):
    """The parts of a compiled artifact needed to reach the deployed contract."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    contract_name: str = Field(default="", alias="contractName")
    abi: list[dict[str, Any]]
    networks: dict[str, NetworkDeployment] = Field(default_factory=dict)

    def address_for(self, network_id: str) -> str:
        """Deployed address on *network_id*."""
        deployment = self.networks.get(str(network_id))
        if deployment is None:
            name = self.contract_name or "contract"
            raise ArtifactError(
                f"{name} has not been deployed to detected network (network/artifact mismatch): {network_id}"
            )
        return deployment.address


def parse_artifact(data: Any, *, source: str = "") -> ContractArtifact:
    try:
        return ContractArtifact.model_validate(data)
    except ValidationError as exc:
        raise ArtifactError(f"Invalid contract artifact {source}: {exc}") from exc


def _is_url(location: str) -> bool:
    return location.startswith(("http://", "https://"))


async def _fetch_artifact(location: str, http: aiohttp.ClientSession) -> Any:
    _logger.debug("GET %s", location)
    try:
        async with http.get(location) as resp:
            text = await resp.text()
            if resp.status != 200:
                raise ArtifactError(f"HTTP {resp.status} fetching artifact {location}: {text[:200]}")
    except aiohttp.ClientError as exc:
        raise ArtifactError(f"Fetching artifact {location} failed: {exc}") from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ArtifactError(f"Artifact {location} is not JSON") from exc


def _read_artifact(location: str) -> Any:
    path = Path(location)
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ArtifactError(f"Cannot read artifact {location}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ArtifactError(f"Artifact {location} is not JSON") from exc


async def load_artifact(location: str, http: aiohttp.ClientSession | None = None) -> ContractArtifact:
    """Load an artifact from a local path or an http(s) URL."""
    if _is_url(location):
        if http is None:
            raise ArtifactError(f"An HTTP session is required to fetch {location}")
        data = await _fetch_artifact(location, http)
    else:
        data = await asyncio.to_thread(_read_artifact, location)
    return parse_artifact(data, source=location)
