"""
Testnet deployment: mock tokens and reward sources, then the CollStakingManager.
"""

import sys
from typing import Dict, NamedTuple, Optional

from deployment.config import DeployConfig
from deployment.contracts import Artifact, ArtifactRegistry
from deployment.deployer import COLL_STAKING_MANAGER, Deployer
from deployment.helper import DeploymentHelper
from deployment.network import DeployedContract, NetworkAPI

DPX = "DPX"
GMX = "GMX"
DPX_STAKING_REWARDS = "DpxStakingRewards"
GMX_REWARD_ROUTER_V2 = "GmxRewardRouterV2"


class RunResult(NamedTuple):
    """Outcome of a deployment run."""

    deployments: Dict[str, DeployedContract]
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1


def _deploy_if_missing(
    config: DeployConfig,
    field: str,
    deployments: Dict[str, DeployedContract],
    helper: DeploymentHelper,
    artifact: Artifact,
    deployment_name: str,
    *args,
) -> None:
    existing = getattr(config, field)
    if existing:
        print(f"(i) Using configured {deployment_name} at {existing}")
        return
    deployed = helper.deploy_contract_by_name(artifact, deployment_name, *args)
    config.set_address(field, deployed.address)
    deployments[deployment_name] = deployed


def deploy_prerequisites(
    config: DeployConfig,
    helper: DeploymentHelper,
    deployments: Optional[Dict[str, DeployedContract]] = None,
) -> Dict[str, DeployedContract]:
    """
    Deploys the mock contracts the CollStakingManager depends on.

    Each deployment is added to ``deployments`` as soon as it is confirmed, so the
    caller still sees the completed ones when a later deployment fails.
    """
    if deployments is None:
        deployments = dict()

    if not config.treasury_address:
        config.set_address("treasury_address", helper.get_signer().address)

    _deploy_if_missing(config, "dpx_token", deployments, helper, Artifact.MOCK_ERC20, DPX, DPX, DPX)
    _deploy_if_missing(config, "gmx_token", deployments, helper, Artifact.MOCK_ERC20, GMX, GMX, GMX)

    _deploy_if_missing(
        config,
        "dpx_staking_rewards",
        deployments,
        helper,
        Artifact.MOCK_DPX_STAKING_REWARDS,
        DPX_STAKING_REWARDS,
        config.dpx_token,
    )
    _deploy_if_missing(
        config,
        "gmx_reward_router_v2",
        deployments,
        helper,
        Artifact.MOCK_GMX_REWARD_ROUTER_V2,
        GMX_REWARD_ROUTER_V2,
        config.gmx_token,
    )
    return deployments


def run(
    config: DeployConfig,
    network: Optional[NetworkAPI] = None,
    registry: Optional[ArtifactRegistry] = None,
) -> RunResult:
    """Runs the whole testnet deployment; errors are reported in the result."""
    deployments = dict()
    try:
        helper = DeploymentHelper(config, network=network, registry=registry)
        deploy_prerequisites(config, helper, deployments)
        deployments[COLL_STAKING_MANAGER] = Deployer(config, helper=helper).run()
    except Exception as e:
        print(f"Deployment failed: {e!r}", file=sys.stderr)
        return RunResult(deployments=deployments, error=e)

    print(f"(i) Deployments recorded in {config.output_file}")
    return RunResult(deployments=deployments)
