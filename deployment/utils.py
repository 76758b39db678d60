import json
from pathlib import Path

import yaml
from ape import networks, project
from ape.contracts import ContractContainer
from eth_utils import encode_hex

from deployment.constants import (
    LOCAL_BLOCKCHAIN_ENVIRONMENTS,
    OZ_DEPENDENCY_NAME,
    OZ_DEPENDENCY_VERSION,
)


def _load_yaml(filepath: Path) -> dict:
    """Loads a YAML file."""
    with open(filepath, "r") as file:
        return yaml.safe_load(file)


def _load_json(filepath: Path) -> dict:
    """Loads a JSON file."""
    with open(filepath, "r") as file:
        return json.load(file)


def is_local_network() -> bool:
    return networks.provider.network.name in LOCAL_BLOCKCHAIN_ENVIRONMENTS


def to_hex_string(value) -> str:
    """Normalizes a transaction hash to a 0x-prefixed string."""
    if isinstance(value, str):
        return value if value.startswith("0x") else f"0x{value}"
    return encode_hex(bytes(value))


def _get_dependency_contract_container(contract: str) -> ContractContainer:
    for dependency_name, dependency_versions in project.dependencies.items():
        if len(dependency_versions) > 1:
            raise ValueError(f"Ambiguous {dependency_name} dependency for {contract}")
        try:
            dependency_api = list(dependency_versions.values())[0]
            contract_container = getattr(dependency_api, contract)
            return contract_container
        except AttributeError:
            continue
    raise ValueError(f"No contract found with name '{contract}'.")


def get_contract_container(contract: str) -> ContractContainer:
    try:
        contract_container = getattr(project, contract)
    except AttributeError:
        # not in root project; check dependencies
        contract_container = _get_dependency_contract_container(contract)

    return contract_container


def get_oz_contract_container(contract: str) -> ContractContainer:
    """Looks up a contract in the pinned OpenZeppelin dependency."""
    oz_dependency = project.dependencies[OZ_DEPENDENCY_NAME][OZ_DEPENDENCY_VERSION]
    return getattr(oz_dependency, contract)
