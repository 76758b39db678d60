from typing import NamedTuple

import pytest
from eth_utils import to_checksum_address

from deployment.config import DeployConfig
from deployment.contracts import Artifact, ArtifactRegistry, ResolvedArtifact
from deployment.exceptions import ConfirmationTimeout, TransactionFailure
from deployment.network import DeployedContract, NetworkAPI, TransactionReceipt

CHAIN_ID = 1337
DEPLOYER_ADDRESS = to_checksum_address("0x" + "ab" * 20)


def _address_input(name):
    return {"name": name, "type": "address", "internalType": "address"}


STUB_ABIS = {
    Artifact.MOCK_ERC20: [
        {
            "type": "constructor",
            "stateMutability": "nonpayable",
            "inputs": [
                {"name": "name", "type": "string", "internalType": "string"},
                {"name": "symbol", "type": "string", "internalType": "string"},
            ],
        }
    ],
    Artifact.MOCK_DPX_STAKING_REWARDS: [
        {"type": "constructor", "stateMutability": "nonpayable", "inputs": [_address_input("_dpx")]}
    ],
    Artifact.MOCK_GMX_REWARD_ROUTER_V2: [
        {"type": "constructor", "stateMutability": "nonpayable", "inputs": [_address_input("_gmx")]}
    ],
    Artifact.COLL_STAKING_MANAGER: [
        {
            "type": "function",
            "name": "setUp",
            "stateMutability": "nonpayable",
            "inputs": [
                _address_input("_treasury"),
                _address_input("_dpx"),
                _address_input("_gmx"),
                _address_input("_dpxStakingRewards"),
                _address_input("_gmxRewardRouterV2"),
            ],
            "outputs": [],
        }
    ],
    Artifact.TRANSPARENT_UPGRADEABLE_PROXY: [
        {
            "type": "constructor",
            "stateMutability": "payable",
            "inputs": [
                _address_input("_logic"),
                _address_input("initialOwner"),
                {"name": "_data", "type": "bytes", "internalType": "bytes"},
            ],
        }
    ],
}


class StubAccount(NamedTuple):
    address: str


class StubContract(NamedTuple):
    address: str
    contract_type: str


def stub_loader(artifact: Artifact) -> ResolvedArtifact:
    return ResolvedArtifact(artifact=artifact, container=artifact.value, abi=STUB_ABIS[artifact])


class StubNetwork(NetworkAPI):
    """Records deployments and transactions instead of talking to a chain."""

    def __init__(self, chain_id: int = CHAIN_ID):
        self._chain_id = chain_id
        self.signer = StubAccount(address=DEPLOYER_ADDRESS)
        self.block_number = 0
        self.deployed = list()
        self.transactions = list()
        self.confirmations = list()
        self.failing_artifacts = set()
        self.reverting_methods = set()
        self.stalled = False
        self.code = set()

    @property
    def chain_id(self) -> int:
        return self._chain_id

    def get_signers(self):
        return [self.signer]

    def deploy(self, signer, resolved, *args, publish=False):
        if resolved.name in self.failing_artifacts:
            raise TransactionFailure(f"Deployment of {resolved.name} reverted")
        self.block_number += 1
        address = to_checksum_address(f"0x{0x1000 + len(self.deployed):040x}")
        self.deployed.append((resolved.name, args))
        self.code.add(address)
        return DeployedContract(
            instance=StubContract(address=address, contract_type=resolved.name),
            address=address,
            abi=resolved.abi,
            tx_hash=f"0x{self.block_number:064x}",
            block_number=self.block_number,
            deployer=signer.address,
        )

    def at(self, resolved, address):
        return DeployedContract(
            instance=StubContract(address=address, contract_type=resolved.name),
            address=address,
            abi=resolved.abi,
        )

    def transact(self, signer, contract, method_name, *args):
        if method_name in self.reverting_methods:
            raise TransactionFailure(f"{method_name} reverted")
        self.block_number += 1
        self.transactions.append((contract.address, method_name, args))
        return TransactionReceipt(
            tx_hash=f"0x{self.block_number:064x}", block_number=self.block_number
        )

    def has_code(self, address):
        return address in self.code

    def wait_for_confirmations(self, block_number, confirmations, timeout):
        if self.stalled:
            raise ConfirmationTimeout(f"Block {block_number} was not confirmed")
        self.confirmations.append((block_number, confirmations))

    def deployed_names(self):
        return [name for name, _ in self.deployed]


@pytest.fixture
def network():
    return StubNetwork()


@pytest.fixture
def registry():
    return ArtifactRegistry(loaders={artifact: stub_loader for artifact in Artifact})


@pytest.fixture
def output_file(tmp_path):
    return tmp_path / "artifacts" / "testnet_deployments.json"


@pytest.fixture
def config(output_file):
    return DeployConfig(output_file=output_file, tx_confirmations=1, autosign=True)


@pytest.fixture
def populated_config(output_file):
    return DeployConfig(
        output_file=output_file,
        autosign=True,
        treasury_address="0x" + "11" * 20,
        dpx_token="0x" + "22" * 20,
        gmx_token="0x" + "33" * 20,
        dpx_staking_rewards="0x" + "44" * 20,
        gmx_reward_router_v2="0x" + "55" * 20,
    )
