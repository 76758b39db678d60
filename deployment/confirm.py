import typing

from ape.utils import ZERO_ADDRESS

from deployment.exceptions import DeploymentAborted


def _ask(question: str) -> None:
    answer = input(question)
    if answer.lower().strip() == "n":
        print("Aborting deployment!")
        raise DeploymentAborted("Deployment aborted by user.")


def _confirm_deployment(deployment_name: str) -> None:
    """Asks the user to confirm the deployment of a single contract."""
    _ask(f"Deploy {deployment_name} Y/N? ")


def _continue() -> None:
    _ask("Continue Y/N? ")


def _confirm_zero_address() -> None:
    _ask("Zero Address detected for deployment parameter; Continue? Y/N? ")


def _confirm_resolution(args: typing.Sequence[typing.Any], deployment_name: str) -> None:
    """Asks the user to confirm the resolved arguments for a single deployment."""
    if len(args) == 0:
        print(f"\n(i) No constructor parameters for {deployment_name}")
        _confirm_deployment(deployment_name)
        return

    print(f"\nParameters for {deployment_name}")
    for position, value in enumerate(args):
        print(f"\t[{position}]={value}")
    _confirm_deployment(deployment_name)
    if ZERO_ADDRESS in args:
        _confirm_zero_address()
