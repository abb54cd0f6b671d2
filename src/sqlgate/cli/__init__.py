"""CLI entry point for `sqlgate`."""

from __future__ import annotations

import logging

import click

from sqlgate.cli.logs import logs
from sqlgate.cli.sanitize import sanitize
from sqlgate.cli.validate import approve, validate


@click.group()
@click.version_option(package_name="sqlgate")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr.")
def main(verbose: bool) -> None:
    """sqlgate: a safety gate for model-generated SQL."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


main.add_command(validate)
main.add_command(approve)
main.add_command(sanitize)
main.add_command(logs)
