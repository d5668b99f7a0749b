#!/usr/bin/env python3
"""Swagger model builder - Entry point."""
import logging
import sys

import click
from colorama import Fore, Style, init

from config import app_config
from src.cli.model_cli import ModelCLI

# Initialize colorama
init(autoreset=True)


def print_banner():
    """Print application banner."""
    click.echo(f"{Fore.CYAN}{'=' * 44}", err=True)
    click.echo(f"{Fore.CYAN}║   {Fore.WHITE}Swagger Model Builder{Fore.CYAN}                ║", err=True)
    click.echo(f"{Fore.CYAN}║   {Fore.WHITE}API Models from Python Types{Fore.CYAN}         ║", err=True)
    click.echo(f"{Fore.CYAN}{'=' * 44}{Style.RESET_ALL}", err=True)


@click.group()
@click.version_option(version="0.1.0")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose):
    """Swagger Model Builder - Document Python types as swagger models."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else app_config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("target")
@click.option("--media-type", "-m", default=None, help="Output media type (default from SWAGGER_MEDIA_TYPE)")
@click.option("--output", "-o", type=click.Path(dir_okay=False), default=None, help="Output file (default stdout)")
@click.option("--compact", is_flag=True, help="Disable pretty printing")
@click.option("--check", is_flag=True, help="Fail when a reference does not resolve")
def models(target, media_type, output, compact, check):
    """Build the models of TARGET (package.module:TypeName)."""
    print_banner()

    cli_tool = ModelCLI()
    exit_code = cli_tool.generate_models(
        target,
        media_type=media_type,
        output=output,
        pretty_print=False if compact else None,
        check=check,
    )
    sys.exit(exit_code)


@cli.command()
def media_types():
    """List supported output media types."""
    print_banner()

    cli_tool = ModelCLI()
    cli_tool.list_media_types()


if __name__ == "__main__":
    cli()
