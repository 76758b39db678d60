import typing
from enum import Enum
from typing import Any, Callable, Dict, List, NamedTuple, Union

from eth_abi import is_encodable

from deployment.exceptions import ArtifactResolutionError, InvalidArguments
from deployment.utils import get_contract_container, get_oz_contract_container

ABI = List[Dict[str, Any]]


class Artifact(str, Enum):
    """Contract artifacts known to the deployment scripts."""

    MOCK_ERC20 = "MockERC20"
    MOCK_DPX_STAKING_REWARDS = "MockDpxStakingRewards"
    MOCK_GMX_REWARD_ROUTER_V2 = "MockGmxRewardRouterV2"
    COLL_STAKING_MANAGER = "CollStakingManager"
    TRANSPARENT_UPGRADEABLE_PROXY = "TransparentUpgradeableProxy"

    def __str__(self) -> str:
        return self.value


class ResolvedArtifact(NamedTuple):
    artifact: Artifact
    container: Any
    abi: ABI

    @property
    def name(self) -> str:
        return self.artifact.value


Loader = Callable[[Artifact], ResolvedArtifact]


def _get_abi(contract_container) -> ABI:
    """Returns the JSON ABI of an ape contract container."""
    contract_abi = list()
    for entry in contract_container.contract_type.abi:
        contract_abi.append(entry.model_dump(by_alias=True, mode="json"))
    return contract_abi


def load_ape_artifact(artifact: Artifact) -> ResolvedArtifact:
    """Looks up a compiled artifact in the ape project or its dependencies."""
    contract_container = get_contract_container(artifact.value)
    return ResolvedArtifact(
        artifact=artifact, container=contract_container, abi=_get_abi(contract_container)
    )


def load_oz_artifact(artifact: Artifact) -> ResolvedArtifact:
    contract_container = get_oz_contract_container(artifact.value)
    return ResolvedArtifact(
        artifact=artifact, container=contract_container, abi=_get_abi(contract_container)
    )


class ArtifactRegistry:
    """Resolves artifact names to compiled contracts."""

    def __init__(self, loaders: Dict[Artifact, Loader]):
        self._loaders = dict(loaders)

    @classmethod
    def from_ape_project(cls) -> "ArtifactRegistry":
        loaders = {artifact: load_ape_artifact for artifact in Artifact}
        loaders[Artifact.TRANSPARENT_UPGRADEABLE_PROXY] = load_oz_artifact
        return cls(loaders=loaders)

    def resolve(self, name: Union[str, Artifact]) -> ResolvedArtifact:
        try:
            artifact = Artifact(name)
        except ValueError:
            raise ArtifactResolutionError(f"Unknown contract artifact '{name}'") from None

        loader = self._loaders.get(artifact)
        if loader is None:
            raise ArtifactResolutionError(f"No loader registered for artifact '{artifact}'")

        try:
            return loader(artifact)
        except (AttributeError, KeyError, ValueError) as e:
            raise ArtifactResolutionError(
                f"Could not resolve artifact '{artifact}': {e}"
            ) from e


def _abi_types(abi_entry: typing.Dict) -> List[str]:
    return [abi_input["type"] for abi_input in abi_entry.get("inputs", [])]


def _matches(abi_entry: typing.Dict, args: typing.Sequence[Any]) -> bool:
    types = _abi_types(abi_entry)
    if len(types) != len(args):
        return False
    return all(is_encodable(abi_type, arg) for abi_type, arg in zip(types, args))


def validate_constructor_args(resolved: ResolvedArtifact, args: typing.Sequence[Any]) -> None:
    """Validates constructor arguments against the constructor ABI."""
    constructors = [entry for entry in resolved.abi if entry.get("type") == "constructor"]
    if not constructors:
        if args:
            raise InvalidArguments(
                f"{resolved.name} has no constructor, but {len(args)} argument(s) were given."
            )
        return

    constructor = constructors[0]
    if not _matches(constructor, args):
        raise InvalidArguments(
            f"Constructor arguments for {resolved.name} do not match "
            f"({', '.join(_abi_types(constructor))}); got {list(args)}"
        )


def validate_method_args(
    resolved: ResolvedArtifact, method_name: str, args: typing.Sequence[Any]
) -> None:
    """Validates transaction arguments against the function ABI(s) with that name."""
    method_abis = [
        entry
        for entry in resolved.abi
        if entry.get("type") == "function" and entry.get("name") == method_name
    ]
    if not method_abis:
        raise InvalidArguments(f"{resolved.name} has no method named '{method_name}'")

    for abi in method_abis:
        if _matches(abi, args):
            return
    raise InvalidArguments(
        f"Could not find ABI for '{method_name}' with {len(args)} arg(s) and given type(s)"
    )
