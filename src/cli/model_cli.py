"""Command implementations for the swagger model CLI."""
import importlib
import logging
from pathlib import Path
from typing import Optional

import click
from colorama import Fore, Style

from config import AppConfig, app_config
from src.entity.errors import EntityError, UnsupportedMediaType
from src.entity.registry import EntityAccessorRegistry, entity_registry
from src.exporter.model_exporter import ModelExporter
from src.swagger.model_builder import ModelBuilder

logger = logging.getLogger(__name__)


class ModelCLI:
    """Builds and exports swagger models from the command line."""

    def __init__(self, config: Optional[AppConfig] = None, accessors: Optional[EntityAccessorRegistry] = None):
        """Initialize CLI."""
        self.config = config or app_config
        self.accessors = accessors or entity_registry
        self.exporter = ModelExporter(self.accessors)

    def print_header(self, title: str):
        """Print a section header."""
        click.echo(f"\n{Fore.CYAN}{'━' * 45}", err=True)
        click.echo(f"{Fore.CYAN}{title}", err=True)
        click.echo(f"{Fore.CYAN}{'━' * 45}{Style.RESET_ALL}\n", err=True)

    @staticmethod
    def load_target(target: str) -> type:
        """
        Import the type named by "package.module:TypeName".

        Raises:
            click.BadParameter: If the module or type cannot be found
        """
        module_name, sep, type_name = target.partition(":")
        if not sep or not module_name or not type_name:
            raise click.BadParameter(f"expected 'module:TypeName', got '{target}'", param_hint="TARGET")

        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            raise click.BadParameter(f"cannot import module '{module_name}': {e}", param_hint="TARGET") from e

        tp = module
        for part in type_name.split("."):
            tp = getattr(tp, part, None)
            if tp is None:
                raise click.BadParameter(f"'{type_name}' not found in '{module_name}'", param_hint="TARGET")
        return tp

    def generate_models(
        self,
        target: str,
        media_type: Optional[str] = None,
        output: Optional[str] = None,
        pretty_print: Optional[bool] = None,
        check: bool = False,
    ) -> int:
        """
        Build the models of a target type and write them out.

        Returns:
            Process exit code (0 ok, 1 dangling references, 2 unsupported media type)
        """
        root = self.load_target(target)
        media_type = media_type or self.config.output.media_type
        if pretty_print is None:
            pretty_print = self.config.output.pretty_print

        builder = ModelBuilder()
        root_id = builder.add_model(root)
        models = builder.registry
        logger.debug(f"Built {len(models)} models for {target}")

        if not root_id:
            click.echo(f"{Fore.YELLOW}{target} has no model (not a dataclass?)", err=True)

        if check:
            dangling = models.dangling_refs()
            if dangling:
                for model_id, prop_name, ref in dangling:
                    click.echo(f"{Fore.RED}✗ {model_id}.{prop_name} → {ref}", err=True)
                return 1

        destination = Path(output) if output else click.get_binary_stream("stdout")
        try:
            self.exporter.export(models, destination, media_type, pretty_print=pretty_print)
        except UnsupportedMediaType as e:
            click.echo(f"{Fore.RED}{e}", err=True)
            return 2
        except EntityError as e:
            click.echo(f"{Fore.RED}Error: {e}", err=True)
            return 1

        if output:
            click.echo(f"{Fore.GREEN}✅ {len(models)} models written to {output}", err=True)
        return 0

    def list_media_types(self):
        """List media types with a registered writer."""
        self.print_header("Media Types")
        for media_type in self.accessors.media_types():
            click.echo(f"  • {media_type}")
