#!/usr/bin/python3

import typing
from pathlib import Path

import click
from ape.cli import ConnectedProviderCommand, network_option

from deployment.config import DeployConfig
from deployment.network import ApeNetwork
from deployment.options import (
    account_option,
    autosign_option,
    config_filepath_option,
    confirmations_option,
    treasury_option,
    verify_option,
)
from deployment.testnet import run


def _load_config(
    config_filepath: Path,
    autosign: bool,
    verify: typing.Optional[bool],
    confirmations: typing.Optional[int],
    treasury: typing.Optional[str],
) -> DeployConfig:
    config = DeployConfig.from_yaml(config_filepath)
    if autosign:
        config.autosign = True
    if verify is not None:
        config.verify = verify
    if confirmations:
        config.tx_confirmations = confirmations
    if treasury:
        config.set_address("treasury_address", treasury)
    return config


def main(
    config_filepath: Path,
    account_alias: typing.Optional[str] = None,
    autosign: bool = False,
    verify: typing.Optional[bool] = None,
    confirmations: typing.Optional[int] = None,
    treasury: typing.Optional[str] = None,
) -> int:
    """Runs the testnet deployment and returns the process exit code."""
    try:
        config = _load_config(config_filepath, autosign, verify, confirmations, treasury)
        network = ApeNetwork(account_alias=account_alias, autosign=config.autosign)
    except Exception as e:
        click.secho(f"Deployment failed: {e}", fg="red", err=True)
        return 1

    result = run(config, network=network)
    if result.ok:
        for name, deployed in result.deployments.items():
            click.secho(f"{name}: {deployed.address}", fg="green")
    else:
        click.secho(f"Deployment failed: {result.error}", fg="red", err=True)
    return result.exit_code


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@config_filepath_option
@account_option
@autosign_option
@verify_option
@confirmations_option
@treasury_option
def cli(network, config_filepath, account_alias, autosign, verify, confirmations, treasury):
    """
    Deploy the testnet mocks (DPX, GMX, DpxStakingRewards, GmxRewardRouterV2)
    and the upgradeable CollStakingManager.

    ape run deploy_testnet --network arbitrum:goerli:infura
    """
    raise SystemExit(
        main(
            config_filepath,
            account_alias=account_alias,
            autosign=autosign,
            verify=verify,
            confirmations=confirmations,
            treasury=treasury,
        )
    )


if __name__ == "__main__":
    cli()
