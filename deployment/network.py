import time
import typing
from abc import ABC, abstractmethod
from typing import Any, List, NamedTuple, Optional

from ape import accounts, chain, networks
from ape.api import AccountAPI
from ape.cli.choices import select_account
from ape.exceptions import ApeException, ContractLogicError
from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address

from deployment.constants import CONFIRMATION_POLL_INTERVAL
from deployment.contracts import ABI, ResolvedArtifact
from deployment.exceptions import ConfirmationTimeout, TransactionFailure
from deployment.utils import is_local_network, to_hex_string


class DeployedContract(NamedTuple):
    """A deployed contract: its address plus a binding to its ABI."""

    instance: Any
    address: ChecksumAddress
    abi: ABI
    tx_hash: Optional[str] = None
    block_number: Optional[int] = None
    deployer: Optional[ChecksumAddress] = None


class TransactionReceipt(NamedTuple):
    tx_hash: str
    block_number: int


class NetworkAPI(ABC):
    """Submits signed transactions to a blockchain network."""

    @property
    @abstractmethod
    def chain_id(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def get_signers(self) -> List[Any]:
        raise NotImplementedError

    @abstractmethod
    def deploy(
        self, signer, resolved: ResolvedArtifact, *args, publish: bool = False
    ) -> DeployedContract:
        raise NotImplementedError

    @abstractmethod
    def at(self, resolved: ResolvedArtifact, address: ChecksumAddress) -> DeployedContract:
        raise NotImplementedError

    @abstractmethod
    def transact(
        self, signer, contract: DeployedContract, method_name: str, *args
    ) -> TransactionReceipt:
        raise NotImplementedError

    @abstractmethod
    def has_code(self, address: ChecksumAddress) -> bool:
        raise NotImplementedError

    @abstractmethod
    def wait_for_confirmations(self, block_number: int, confirmations: int, timeout: int) -> None:
        raise NotImplementedError


def _select_deployer_account(account_alias: Optional[str] = None) -> AccountAPI:
    if is_local_network():
        return accounts.test_accounts[0]
    if account_alias:
        return accounts.load(account_alias)
    return select_account()


class ApeNetwork(NetworkAPI):
    """NetworkAPI backed by the connected ape provider."""

    def __init__(
        self,
        account: typing.Optional[AccountAPI] = None,
        account_alias: typing.Optional[str] = None,
        autosign: bool = False,
        poll_interval: float = CONFIRMATION_POLL_INTERVAL,
    ):
        self._account = account or _select_deployer_account(account_alias)
        if autosign and hasattr(self._account, "set_autosign"):
            print("WARNING: Autosign is enabled. Transactions will be signed automatically.")
            self._account.set_autosign(True)
        self.poll_interval = poll_interval

    @property
    def chain_id(self) -> int:
        return networks.provider.chain_id

    def get_signers(self) -> List[AccountAPI]:
        return [self._account]

    def deploy(
        self, signer, resolved: ResolvedArtifact, *args, publish: bool = False
    ) -> DeployedContract:
        try:
            # confirmations are awaited separately, see wait_for_confirmations
            instance = signer.deploy(
                resolved.container, *args, publish=publish, required_confirmations=0
            )
        except ContractLogicError as e:
            raise TransactionFailure(f"Deployment of {resolved.name} reverted: {e}") from e
        except ApeException as e:
            raise TransactionFailure(f"Deployment of {resolved.name} failed: {e}") from e

        receipt = instance.receipt
        return DeployedContract(
            instance=instance,
            address=to_checksum_address(instance.address),
            abi=resolved.abi,
            tx_hash=to_hex_string(receipt.txn_hash),
            block_number=receipt.block_number,
            deployer=to_checksum_address(receipt.transaction.sender),
        )

    def at(self, resolved: ResolvedArtifact, address: ChecksumAddress) -> DeployedContract:
        instance = resolved.container.at(address)
        return DeployedContract(
            instance=instance, address=to_checksum_address(address), abi=resolved.abi
        )

    def transact(
        self, signer, contract: DeployedContract, method_name: str, *args
    ) -> TransactionReceipt:
        method = getattr(contract.instance, method_name)
        try:
            receipt = method(*args, sender=signer, required_confirmations=0)
        except ContractLogicError as e:
            raise TransactionFailure(f"{method_name} reverted: {e}") from e
        except ApeException as e:
            raise TransactionFailure(f"{method_name} failed: {e}") from e

        return TransactionReceipt(
            tx_hash=to_hex_string(receipt.txn_hash), block_number=receipt.block_number
        )

    def has_code(self, address: ChecksumAddress) -> bool:
        return len(networks.provider.get_code(address)) > 0

    def wait_for_confirmations(self, block_number: int, confirmations: int, timeout: int) -> None:
        """Blocks until the given block has the required number of confirmations."""
        deadline = time.monotonic() + timeout
        while chain.blocks.height - block_number + 1 < confirmations:
            if time.monotonic() >= deadline:
                raise ConfirmationTimeout(
                    f"Block {block_number} did not reach {confirmations} "
                    f"confirmation(s) within {timeout}s"
                )
            time.sleep(self.poll_interval)
