from types import SimpleNamespace
from unittest.mock import Mock

import pytest
from ape.exceptions import ApeException
from eth_utils import is_checksum_address

from deployment.contracts import Artifact
from deployment.exceptions import ConfirmationTimeout, TransactionFailure
from deployment.network import ApeNetwork, DeployedContract

CONTRACT_ADDRESS = "0x" + "ab" * 20
SENDER = "0x" + "cd" * 20


class _Blocks:
    def __init__(self, heights):
        self._heights = iter(heights)
        self.last = None

    @property
    def height(self):
        self.last = next(self._heights, self.last)
        return self.last


@pytest.fixture
def account():
    account = Mock()
    account.address = SENDER
    return account


@pytest.fixture
def ape_network(account):
    return ApeNetwork(account=account, poll_interval=0)


def _receipt(block_number=10):
    return SimpleNamespace(
        txn_hash=bytes.fromhex("01" * 32),
        block_number=block_number,
        transaction=SimpleNamespace(sender=SENDER),
    )


def test_deploy(ape_network, account, registry):
    resolved = registry.resolve(Artifact.MOCK_ERC20)
    account.deploy.return_value = SimpleNamespace(address=CONTRACT_ADDRESS, receipt=_receipt())

    deployed = ape_network.deploy(account, resolved, "DPX", "DPX", publish=True)

    account.deploy.assert_called_once_with(
        resolved.container, "DPX", "DPX", publish=True, required_confirmations=0
    )
    assert is_checksum_address(deployed.address)
    assert deployed.tx_hash == "0x" + "01" * 32
    assert deployed.block_number == 10
    assert deployed.abi == resolved.abi


def test_deploy_failure(ape_network, account, registry):
    account.deploy.side_effect = ApeException("insufficient funds")
    with pytest.raises(TransactionFailure, match="insufficient funds"):
        ape_network.deploy(account, registry.resolve(Artifact.MOCK_ERC20), "DPX", "DPX")


def test_transact(ape_network, account):
    instance = Mock()
    instance.setUp.return_value = _receipt(block_number=12)
    contract = DeployedContract(instance=instance, address=CONTRACT_ADDRESS, abi=[])

    receipt = ape_network.transact(account, contract, "setUp", SENDER)

    instance.setUp.assert_called_once_with(SENDER, sender=account, required_confirmations=0)
    assert receipt.block_number == 12


def test_transact_failure(ape_network, account):
    instance = Mock()
    instance.setUp.side_effect = ApeException("execution reverted")
    contract = DeployedContract(instance=instance, address=CONTRACT_ADDRESS, abi=[])

    with pytest.raises(TransactionFailure, match="setUp"):
        ape_network.transact(account, contract, "setUp")


def test_wait_for_confirmations(ape_network, monkeypatch):
    blocks = _Blocks([10, 10, 11, 12])
    monkeypatch.setattr("deployment.network.chain", SimpleNamespace(blocks=blocks))

    ape_network.wait_for_confirmations(block_number=10, confirmations=3, timeout=60)
    assert blocks.last == 12


def test_wait_for_confirmations_timeout(ape_network, monkeypatch):
    blocks = _Blocks([10])
    monkeypatch.setattr("deployment.network.chain", SimpleNamespace(blocks=blocks))

    with pytest.raises(ConfirmationTimeout):
        ape_network.wait_for_confirmations(block_number=10, confirmations=2, timeout=0)


def test_signers(ape_network, account):
    assert ape_network.get_signers() == [account]


@pytest.mark.parametrize("code, expected", [(b"", False), (b"\x60\x80", True)])
def test_has_code(ape_network, monkeypatch, code, expected):
    provider = Mock()
    provider.get_code.return_value = code
    monkeypatch.setattr("deployment.network.networks", SimpleNamespace(provider=provider))

    assert ape_network.has_code(CONTRACT_ADDRESS) is expected
    provider.get_code.assert_called_once_with(CONTRACT_ADDRESS)
