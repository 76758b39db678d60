import typing
from pathlib import Path
from typing import Any, List, Optional

from eth_typing import ChecksumAddress
from eth_utils import is_address, to_checksum_address

from deployment.constants import (
    ARTIFACTS_DIR,
    DEFAULT_CONFIRMATION_TIMEOUT,
    DEFAULT_TX_CONFIRMATIONS,
)
from deployment.utils import _load_yaml

# CollStakingManager.setUp argument order
MANAGER_DEPENDENCIES = (
    "treasury_address",
    "dpx_token",
    "gmx_token",
    "dpx_staking_rewards",
    "gmx_reward_router_v2",
)

# keys of the 'addresses' section -> config attributes
ADDRESS_FIELDS = {
    "treasury": "treasury_address",
    "dpx_token": "dpx_token",
    "gmx_token": "gmx_token",
    "dpx_staking_rewards": "dpx_staking_rewards",
    "gmx_reward_router_v2": "gmx_reward_router_v2",
}


def _to_address(field: str, value: Any) -> Optional[ChecksumAddress]:
    if value is None or value == "":
        return None
    if not isinstance(value, str) or not is_address(value):
        raise DeployConfig.Invalid(f"'{field}' is not a valid address: {value!r}")
    return to_checksum_address(value)


def _to_int(field: str, value: Any, min_value: int) -> int:
    try:
        ivalue = int(value)
    except (TypeError, ValueError):
        raise DeployConfig.Invalid(f"'{field}' must be an integer, got {value!r}")
    if isinstance(value, bool) or ivalue < min_value:
        raise DeployConfig.Invalid(f"'{field}' must be an integer >= {min_value}, got {value!r}")
    return ivalue


def get_output_filepath(config: typing.Dict) -> Path:
    """Returns the filepath of the deployment manifest."""
    artifact_config = config.get("artifacts") or {}
    artifact_dir = Path(artifact_config.get("dir") or ARTIFACTS_DIR)
    filename = artifact_config.get("filename")
    if not filename:
        raise DeployConfig.Invalid("artifact filename is not set in config file.")
    return artifact_dir / filename


class DeployConfig:
    """
    Deployment parameters for a single run.

    Dependency addresses start out empty and are filled in as the
    prerequisite contracts get deployed.
    """

    class Invalid(ValueError):
        """Raised when the deployment configuration is invalid"""

    def __init__(
        self,
        output_file: Path,
        tx_confirmations: int = DEFAULT_TX_CONFIRMATIONS,
        treasury_address: Optional[str] = None,
        dpx_token: Optional[str] = None,
        gmx_token: Optional[str] = None,
        dpx_staking_rewards: Optional[str] = None,
        gmx_reward_router_v2: Optional[str] = None,
        confirmation_timeout: int = DEFAULT_CONFIRMATION_TIMEOUT,
        reuse_deployments: bool = True,
        verify: bool = False,
        autosign: bool = False,
    ):
        self.output_file = Path(output_file)
        self.tx_confirmations = _to_int("tx_confirmations", tx_confirmations, min_value=1)
        self.confirmation_timeout = _to_int(
            "confirmation_timeout", confirmation_timeout, min_value=1
        )
        self.reuse_deployments = reuse_deployments
        self.verify = verify
        self.autosign = autosign

        self.treasury_address = _to_address("treasury_address", treasury_address)
        self.dpx_token = _to_address("dpx_token", dpx_token)
        self.gmx_token = _to_address("gmx_token", gmx_token)
        self.dpx_staking_rewards = _to_address("dpx_staking_rewards", dpx_staking_rewards)
        self.gmx_reward_router_v2 = _to_address("gmx_reward_router_v2", gmx_reward_router_v2)

    @classmethod
    def from_dict(cls, config: typing.Dict) -> "DeployConfig":
        if not isinstance(config, dict):
            raise cls.Invalid("Malformed deployment config.")

        deployment = config.get("deployment") or {}
        addresses = config.get("addresses") or {}
        unknown = set(addresses) - set(ADDRESS_FIELDS)
        if unknown:
            raise cls.Invalid(f"Unknown address entries: {', '.join(sorted(unknown))}")

        kwargs = {ADDRESS_FIELDS[key]: value for key, value in addresses.items()}
        return cls(
            output_file=get_output_filepath(config),
            tx_confirmations=deployment.get("tx_confirmations", DEFAULT_TX_CONFIRMATIONS),
            confirmation_timeout=deployment.get(
                "confirmation_timeout", DEFAULT_CONFIRMATION_TIMEOUT
            ),
            reuse_deployments=bool(deployment.get("reuse_deployments", True)),
            verify=bool(deployment.get("verify", False)),
            autosign=bool(deployment.get("autosign", False)),
            **kwargs,
        )

    @classmethod
    def from_yaml(cls, filepath: Path) -> "DeployConfig":
        print(f"Loading deployment config {filepath}...")
        return cls.from_dict(_load_yaml(filepath))

    def set_address(self, field: str, value: str) -> ChecksumAddress:
        if field not in MANAGER_DEPENDENCIES:
            raise self.Invalid(f"Unknown address field '{field}'")
        address = _to_address(field, value)
        if address is None:
            raise self.Invalid(f"'{field}' cannot be empty")
        setattr(self, field, address)
        return address

    def missing(self, *fields: str) -> List[str]:
        return [field for field in fields if not getattr(self, field)]

    def require(self, *fields: str) -> List[ChecksumAddress]:
        """Returns the addresses for the given fields, in order."""
        missing = self.missing(*fields)
        if missing:
            raise self.Invalid(f"Missing address(es) in deployment config: {', '.join(missing)}")
        return [getattr(self, field) for field in fields]

    def manager_initializer_args(self) -> List[ChecksumAddress]:
        return self.require(*MANAGER_DEPENDENCIES)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(output_file={str(self.output_file)!r})"
