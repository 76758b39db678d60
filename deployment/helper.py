from typing import Any, Optional, Sequence, Union

from deployment.config import DeployConfig
from deployment.confirm import _confirm_resolution, _continue
from deployment.contracts import (
    Artifact,
    ArtifactRegistry,
    ResolvedArtifact,
    validate_constructor_args,
    validate_method_args,
)
from deployment.exceptions import InitializerFailure, TransactionFailure
from deployment.manifest import Manifest, ManifestEntry, normalize_args
from deployment.network import ApeNetwork, DeployedContract, NetworkAPI

ArtifactName = Union[str, Artifact]


class DeploymentHelper:
    """
    Deploys contracts by artifact name and records them in the output manifest.

    Every transaction is awaited until it has ``config.tx_confirmations``
    confirmations before the next one is submitted.
    """

    def __init__(
        self,
        config: DeployConfig,
        network: Optional[NetworkAPI] = None,
        registry: Optional[ArtifactRegistry] = None,
    ):
        self.config = config
        self.network = network or ApeNetwork(autosign=config.autosign)
        self.registry = registry or ArtifactRegistry.from_ape_project()
        self.manifest = Manifest(filepath=config.output_file, chain_id=self.network.chain_id)
        self._signer = None

    def get_signer(self):
        """Returns the signer used for every transaction of this run."""
        if self._signer is None:
            signers = self.network.get_signers()
            if not signers:
                raise TransactionFailure("No signer available on the current network.")
            self._signer = signers[0]
        return self._signer

    def deploy_contract_by_name(
        self, artifact_name: ArtifactName, deployment_name: str, *constructor_args
    ) -> DeployedContract:
        resolved = self.registry.resolve(artifact_name)
        validate_constructor_args(resolved, constructor_args)

        existing = self._get_existing(resolved, deployment_name, constructor_args)
        if existing:
            return existing

        if not self.config.autosign:
            _confirm_resolution(constructor_args, deployment_name)

        deployed = self._deploy(resolved, *constructor_args)
        self._record(deployment_name, resolved, deployed, args=constructor_args)
        print(f"'{deployment_name}' deployed to: {deployed.address}")
        return deployed

    def deploy_upgradeable_contract_with_name(
        self,
        artifact_name: ArtifactName,
        deployment_name: str,
        initializer_fn_name: str,
        *initializer_args,
    ) -> DeployedContract:
        resolved = self.registry.resolve(artifact_name)
        proxy = self.registry.resolve(Artifact.TRANSPARENT_UPGRADEABLE_PROXY)
        validate_constructor_args(resolved, ())
        validate_method_args(resolved, initializer_fn_name, initializer_args)

        existing = self._get_existing(resolved, deployment_name, initializer_args)
        if existing:
            return existing

        if not self.config.autosign:
            _confirm_resolution(initializer_args, deployment_name)

        implementation = self._deploy(resolved)
        print(f"\nDeploying {proxy.name} contract to proxy {deployment_name}.")
        signer = self.get_signer()
        proxy_params = [implementation.address, signer.address, b""]
        validate_constructor_args(proxy, proxy_params)
        proxy_contract = self._deploy(proxy, *proxy_params)

        print(
            f"\nWrapping {deployment_name} into {proxy.name} "
            f"(as type {resolved.name}) at {proxy_contract.address}."
        )
        wrapped = self.network.at(resolved, proxy_contract.address)
        wrapped = wrapped._replace(
            tx_hash=proxy_contract.tx_hash,
            block_number=proxy_contract.block_number,
            deployer=proxy_contract.deployer,
        )

        self._initialize(wrapped, implementation, initializer_fn_name, *initializer_args)

        self._record(
            deployment_name,
            resolved,
            wrapped,
            implementation=implementation.address,
            args=initializer_args,
        )
        print(
            f"'{deployment_name}' deployed to: {wrapped.address} "
            f"(implementation: {implementation.address})"
        )
        return wrapped

    def _deploy(self, resolved: ResolvedArtifact, *args) -> DeployedContract:
        deployed = self.network.deploy(
            self.get_signer(), resolved, *args, publish=self.config.verify
        )
        self._await(deployed.block_number)
        return deployed

    def _initialize(
        self,
        proxy_contract: DeployedContract,
        implementation: DeployedContract,
        initializer_fn_name: str,
        *initializer_args,
    ) -> None:
        pretty_args = "\n\t".join(str(arg) for arg in initializer_args)
        print(
            f"\nTransacting [{proxy_contract.address[:10]}].{initializer_fn_name} "
            f"with arguments:\n\t{pretty_args}"
        )
        if not self.config.autosign:
            _continue()

        try:
            receipt = self.network.transact(
                self.get_signer(), proxy_contract, initializer_fn_name, *initializer_args
            )
            self._await(receipt.block_number)
        except TransactionFailure as e:
            raise InitializerFailure(
                f"{initializer_fn_name} failed on proxy {proxy_contract.address}: {e}",
                proxy_address=proxy_contract.address,
                implementation_address=implementation.address,
            ) from e

    def _await(self, block_number: int) -> None:
        self.network.wait_for_confirmations(
            block_number=block_number,
            confirmations=self.config.tx_confirmations,
            timeout=self.config.confirmation_timeout,
        )

    def _get_existing(
        self, resolved: ResolvedArtifact, deployment_name: str, args: Sequence[Any]
    ) -> Optional[DeployedContract]:
        """
        Returns the recorded deployment of the same artifact, deployed with the
        same arguments, if it still has code on chain.
        """
        if not self.config.reuse_deployments:
            return None
        entry = self.manifest.get(deployment_name)
        if entry is None or entry.contract_type != resolved.name:
            return None
        if entry.args is None or normalize_args(entry.args) != normalize_args(args):
            print(f"(i) '{deployment_name}' was recorded with different arguments; redeploying.")
            return None
        if not self.network.has_code(entry.address):
            print(f"(i) No code at {entry.address} for '{deployment_name}'; redeploying.")
            return None
        print(f"(i) Reusing '{deployment_name}' at {entry.address} from {self.manifest.filepath}")
        existing = self.network.at(resolved, entry.address)
        return existing._replace(
            tx_hash=entry.tx_hash, block_number=entry.block_number, deployer=entry.deployer
        )

    def _record(
        self,
        deployment_name: str,
        resolved: ResolvedArtifact,
        deployed: DeployedContract,
        implementation: Optional[Any] = None,
        args: Sequence[Any] = (),
    ) -> None:
        entry = ManifestEntry(
            chain_id=self.network.chain_id,
            name=deployment_name,
            contract_type=resolved.name,
            address=deployed.address,
            implementation=implementation,
            abi=resolved.abi,
            tx_hash=deployed.tx_hash,
            block_number=deployed.block_number,
            deployer=deployed.deployer,
            args=normalize_args(args),
        )
        self.manifest.record(entry)
