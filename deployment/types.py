import click
from ape.utils import ZERO_ADDRESS
from eth_utils import is_address, to_checksum_address


class ChecksumAddress(click.ParamType):
    """An Ethereum address, converted to its checksummed form."""

    name = "address"

    def __init__(self, allow_zero: bool = False):
        self.allow_zero = allow_zero

    def convert(self, value, param, ctx):
        if not isinstance(value, str) or not is_address(value):
            self.fail(f"{value!r} is not an ethereum address", param, ctx)
        address = to_checksum_address(value)
        if address == ZERO_ADDRESS and not self.allow_zero:
            self.fail("the zero address is not allowed", param, ctx)
        return address
