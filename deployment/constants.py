from pathlib import Path

import deployment

#
# Filesystem
#

DEPLOYMENT_DIR = Path(deployment.__file__).parent
CONFIGS_DIR = DEPLOYMENT_DIR / "configs"

# relative to the working directory the scripts are run from
ARTIFACTS_DIR = Path("artifacts")

TESTNET_CONFIG_FILEPATH = CONFIGS_DIR / "testnet.yml"

#
# Dependencies
#

OZ_DEPENDENCY_NAME = "openzeppelin"
OZ_DEPENDENCY_VERSION = "5.0.0"

#
# Networks
#

LOCAL_BLOCKCHAIN_ENVIRONMENTS = ["local"]

#
# Transactions
#

DEFAULT_TX_CONFIRMATIONS = 1
DEFAULT_CONFIRMATION_TIMEOUT = 600  # seconds
CONFIRMATION_POLL_INTERVAL = 2  # seconds
