import click
import pytest
from click.testing import CliRunner
from eth_utils import to_checksum_address

from deployment.options import confirmations_option, treasury_option
from deployment.types import ChecksumAddress

TREASURY = "0x" + "cd" * 20
ZERO = "0x" + "00" * 20


@click.command()
@treasury_option
@confirmations_option
def echo(treasury, confirmations):
    click.echo(f"{treasury} {confirmations}")


def test_address_is_checksummed():
    assert ChecksumAddress().convert(TREASURY, None, None) == to_checksum_address(TREASURY)


@pytest.mark.parametrize("value", ["0x1234", "treasury", 42])
def test_invalid_address(value):
    with pytest.raises(click.BadParameter, match="not an ethereum address"):
        ChecksumAddress().convert(value, None, None)


def test_zero_address():
    with pytest.raises(click.BadParameter, match="zero address"):
        ChecksumAddress().convert(ZERO, None, None)
    assert ChecksumAddress(allow_zero=True).convert(ZERO, None, None) == ZERO


def test_options():
    result = CliRunner().invoke(echo, ["--treasury", TREASURY, "--confirmations", "3"])
    assert result.exit_code == 0, result.output
    assert result.output.strip() == f"{to_checksum_address(TREASURY)} 3"


@pytest.mark.parametrize(
    "args", [["--treasury", ZERO], ["--confirmations", "0"], ["--confirmations", "x"]]
)
def test_rejected_options(args):
    result = CliRunner().invoke(echo, args)
    assert result.exit_code == 2
