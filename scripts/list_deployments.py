#!/usr/bin/python3

from itertools import groupby
from pathlib import Path
from typing import List

import click

from deployment.constants import ARTIFACTS_DIR
from deployment.manifest import ManifestEntry, read_manifest
from deployment.options import chain_id_option


def _display_manifest_entries(entries: List[ManifestEntry]) -> None:
    """Display manifest entries grouped by chain ID."""
    entries = sorted(entries, key=lambda e: (e.chain_id, e.name))
    for chain_id, chain_entries in groupby(entries, key=lambda e: e.chain_id):
        click.secho(f"Chain {chain_id}", fg="yellow")
        for index, entry in enumerate(chain_entries, start=1):
            line = f"    {index}. {entry.name} ({entry.contract_type}) {entry.address}"
            if entry.is_upgradeable:
                line += f" -> {entry.implementation}"
            click.secho(line, fg="cyan")


@click.command(name="list-deployments")
@click.option(
    "--manifest",
    "-m",
    "manifest_filepath",
    help="Deployment manifest file",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    default=ARTIFACTS_DIR / "testnet_deployments.json",
)
@chain_id_option
def cli(manifest_filepath, chain_id):
    """List the deployments recorded in a manifest. Optionally filter by chain."""
    entries = read_manifest(filepath=manifest_filepath)
    if chain_id is not None:
        entries = [entry for entry in entries if entry.chain_id == chain_id]
    if not entries:
        click.secho("No deployments found.", fg="red")
        return
    _display_manifest_entries(entries)


if __name__ == "__main__":
    cli()
