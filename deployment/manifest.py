import json
import os
import tempfile
from collections import defaultdict
from pathlib import Path
from typing import Any, Dict, Iterator, List, NamedTuple, Optional, Sequence

from eth_typing import ChecksumAddress
from eth_utils import encode_hex, is_address, to_checksum_address

from deployment.exceptions import ManifestError
from deployment.utils import _load_json

ChainId = int
DeploymentName = str


STANDARD_MANIFEST_JSON_FORMAT = {"indent": 4, "separators": (",", ": ")}


class ManifestEntry(NamedTuple):
    """Represents a single deployment recorded in the manifest."""

    chain_id: ChainId
    name: DeploymentName
    contract_type: str
    address: ChecksumAddress
    implementation: Optional[ChecksumAddress]
    abi: list
    tx_hash: str
    block_number: int
    deployer: str
    # constructor arguments, or initializer arguments for upgradeable deployments
    args: Optional[list] = None

    @property
    def is_upgradeable(self) -> bool:
        return self.implementation is not None


def normalize_args(args: Sequence[Any]) -> list:
    """Returns call arguments in the form they are stored in the manifest."""
    normalized = list()
    for arg in args:
        if isinstance(arg, (list, tuple)):
            normalized.append(normalize_args(arg))
        elif isinstance(arg, (bytes, bytearray)):
            normalized.append(encode_hex(bytes(arg)))
        elif isinstance(arg, str) and is_address(arg):
            normalized.append(to_checksum_address(arg))
        else:
            normalized.append(arg)
    return normalized


def _checksum(value, name: str, field: str) -> ChecksumAddress:
    if not isinstance(value, str) or not is_address(value):
        raise ManifestError(f"Invalid {field} for '{name}': {value!r}")
    return to_checksum_address(value)


def _entry_from_json(chain_id: str, name: str, artifacts: dict) -> ManifestEntry:
    try:
        implementation = artifacts.get("implementation")
        args = artifacts.get("args")
        if args is not None and not isinstance(args, list):
            raise ManifestError(f"Invalid args for '{name}': {args!r}")
        return ManifestEntry(
            chain_id=int(chain_id),
            name=name,
            contract_type=artifacts.get("contract_type", name),
            address=_checksum(artifacts["address"], name, "address"),
            implementation=(
                _checksum(implementation, name, "implementation") if implementation else None
            ),
            abi=artifacts.get("abi", []),
            tx_hash=artifacts["tx_hash"],
            block_number=int(artifacts["block_number"]),
            deployer=artifacts["deployer"],
            args=args,
        )
    except ManifestError:
        raise
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise ManifestError(f"Malformed manifest entry '{name}' on chain {chain_id}: {e}") from e


def _entry_to_json(entry: ManifestEntry) -> dict:
    entry_abi = list(entry.abi)
    entry_abi.sort(key=lambda d: (d["type"], d.get("name", "")))

    data = {
        "address": entry.address,
        "contract_type": entry.contract_type,
        "abi": entry_abi,
        "tx_hash": entry.tx_hash,
        "block_number": int(entry.block_number),
        "deployer": entry.deployer,
    }
    if entry.args is not None:
        data["args"] = normalize_args(entry.args)
    if entry.implementation:
        data["implementation"] = entry.implementation
    return data


def read_manifest(filepath: Path) -> List[ManifestEntry]:
    try:
        data = _load_json(filepath)
    except json.JSONDecodeError as e:
        raise ManifestError(f"Manifest at {filepath} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ManifestError(f"Manifest at {filepath} must be a JSON object.")

    manifest_entries = list()
    for chain_id, entries in data.items():
        if not isinstance(entries, dict):
            raise ManifestError(f"Malformed manifest section for chain {chain_id}.")
        for name, artifacts in entries.items():
            manifest_entries.append(_entry_from_json(chain_id, name, artifacts))
    return manifest_entries


def write_manifest(entries: List[ManifestEntry], filepath: Path) -> Path:
    """
    Writes deployment entries to a manifest file.

    Entries are merged into an existing manifest: an entry with the same chain id
    and name replaces the previous one, everything else is preserved.
    """
    data = defaultdict(dict)
    if filepath.exists():
        for existing in read_manifest(filepath):
            data[str(existing.chain_id)][existing.name] = _entry_to_json(existing)

    for entry in entries:
        data[str(entry.chain_id)][entry.name] = _entry_to_json(entry)

    # Sort to enforce a stable file layout
    ordered = {
        chain_id: dict(sorted(data[chain_id].items()))
        for chain_id in sorted(data, key=lambda c: int(c))
    }

    # Create the parent directory if it does not exist
    filepath.parent.mkdir(parents=True, exist_ok=True)

    fd, temp_filepath = tempfile.mkstemp(
        dir=filepath.parent, prefix=f".{filepath.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w") as file:
            json.dump(ordered, file, **STANDARD_MANIFEST_JSON_FORMAT)
        os.replace(temp_filepath, filepath)
    except BaseException:
        os.unlink(temp_filepath)
        raise

    return filepath


class Manifest:
    """The deployments recorded in a manifest file for a single chain."""

    def __init__(self, filepath: Path, chain_id: ChainId):
        self.filepath = Path(filepath)
        self.chain_id = chain_id
        self._entries: Dict[DeploymentName, ManifestEntry] = dict()
        if self.filepath.exists():
            for entry in read_manifest(self.filepath):
                if entry.chain_id == chain_id:
                    self._entries[entry.name] = entry

    def get(self, name: DeploymentName) -> Optional[ManifestEntry]:
        return self._entries.get(name)

    def names(self) -> List[DeploymentName]:
        return list(self._entries)

    def record(self, entry: ManifestEntry) -> None:
        """Adds or replaces an entry and persists it immediately."""
        if entry.chain_id != self.chain_id:
            raise ManifestError(
                f"Cannot record '{entry.name}' for chain {entry.chain_id} "
                f"in manifest for chain {self.chain_id}"
            )
        write_manifest(entries=[entry], filepath=self.filepath)
        self._entries[entry.name] = entry

    def __contains__(self, name: DeploymentName) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[ManifestEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)
