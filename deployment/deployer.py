from typing import Optional

from deployment.config import DeployConfig
from deployment.contracts import Artifact
from deployment.helper import DeploymentHelper
from deployment.network import DeployedContract

COLL_STAKING_MANAGER = "CollStakingManager"
COLL_STAKING_MANAGER_INITIALIZER = "setUp"


class Deployer:
    """Deploys the CollStakingManager and wires it to its dependencies."""

    def __init__(self, config: DeployConfig, helper: Optional[DeploymentHelper] = None):
        self.config = config
        self.helper = helper or DeploymentHelper(config)
        self.deployer = None
        self.coll_staking_manager: Optional[DeployedContract] = None

    def run(self) -> DeployedContract:
        print(f"\nDeploying {COLL_STAKING_MANAGER}...")
        self.deployer = self.helper.get_signer()
        initializer_args = self.config.manager_initializer_args()

        self.coll_staking_manager = self.helper.deploy_upgradeable_contract_with_name(
            Artifact.COLL_STAKING_MANAGER,
            COLL_STAKING_MANAGER,
            COLL_STAKING_MANAGER_INITIALIZER,
            *initializer_args,
        )
        return self.coll_staking_manager
