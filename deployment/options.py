from pathlib import Path

import click

from deployment.constants import TESTNET_CONFIG_FILEPATH
from deployment.types import ChecksumAddress

config_filepath_option = click.option(
    "--config-filepath",
    "-c",
    help="Deployment config YAML file",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    default=TESTNET_CONFIG_FILEPATH,
    show_default=True,
)

account_option = click.option(
    "--account",
    "account_alias",
    help="Alias of the ape account used to sign transactions",
    type=click.STRING,
    required=False,
)

autosign_option = click.option(
    "--autosign",
    help="Sign transactions and skip confirmations automatically",
    is_flag=True,
    default=False,
)

verify_option = click.option(
    "--verify/--no-verify",
    help="Publish contract sources to the block explorer",
    default=None,
)

confirmations_option = click.option(
    "--confirmations",
    help="Number of confirmations to wait for after each transaction",
    type=click.IntRange(min=1),
    required=False,
)

treasury_option = click.option(
    "--treasury",
    help="Treasury address; defaults to the deployer account",
    type=ChecksumAddress(),
    required=False,
)

chain_id_option = click.option(
    "--chain-id",
    help="Only show deployments on this chain",
    type=int,
    required=False,
)
