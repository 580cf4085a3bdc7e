"""Design token management CLI commands.

This module provides CLI commands for inspecting token registries, resolving
them against a base theme, validating references and exporting documents.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
import yaml
from rich.console import Console
from rich.errors import StyleSyntaxError
from rich.panel import Panel
from rich.style import Style
from rich.table import Table
from rich.text import Text

from . import __version__
from .config import ConfigModel, load_config, OUTPUT_FORMATS, LOG_LEVELS
from .token_engine import (
    TokenEngine,
    TokenRegistry,
    get_keyframe_reference,
    list_presets,
    list_base_themes,
)

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def source_options(func):
    """Add the --file/--preset options that pick a token registry."""
    func = click.option('--preset', help='Built-in token preset to load')(func)
    func = click.option('--file', '-f', 'token_file', type=click.Path(dir_okay=False),
                        help='Token document (YAML or JSON) to load')(func)
    return func


def load_registry(config: ConfigModel, token_file: Optional[str],
                  preset: Optional[str]) -> TokenRegistry:
    """Pick the registry from options first, then from config."""
    logger.debug(f"Selecting token source (file={token_file}, preset={preset})")
    if token_file:
        return TokenRegistry.from_file(token_file)
    if preset:
        return TokenRegistry.from_preset(preset)
    if config.token_file:
        return TokenRegistry.from_file(config.token_file)
    return TokenRegistry.from_preset(config.preset)


def fail(message: str) -> None:
    Console(stderr=True).print(f"[red]{message}[/red]")
    sys.exit(1)


def dump_document(document, output_format: str) -> str:
    if output_format == 'json':
        return json.dumps(document, indent=2)
    return yaml.safe_dump(document, default_flow_style=False, sort_keys=False, indent=2)


def swatch(value: str) -> Text:
    try:
        return Text("    ", style=Style.parse(f"on {value}"))
    except StyleSyntaxError:
        return Text("")


@click.group()
@click.version_option(__version__, prog_name="design-tokens")
@click.option('--config', 'config_path', type=click.Path(dir_okay=False),
              help='Config file (defaults to $DESIGN_TOKENS_CONFIG or ./design_tokens.yaml)')
@click.option('--log-level', type=click.Choice(LOG_LEVELS, case_sensitive=False),
              help='Override the configured log level')
@click.pass_context
def cli(ctx, config_path: Optional[str], log_level: Optional[str]):
    """Inspect, resolve and validate design tokens."""
    try:
        config = load_config(Path(config_path) if config_path else None)
    except ValueError as e:
        fail(f"Error loading config: {e}")

    level = (log_level or config.log_level).upper()
    logging.basicConfig(level=getattr(logging, level), format=LOG_FORMAT)

    ctx.obj = config


@cli.command()
@source_options
@click.pass_obj
def show(config: ConfigModel, token_file: Optional[str], preset: Optional[str]):
    """Show the extension tokens of a registry."""
    try:
        registry = load_registry(config, token_file, preset)
    except (FileNotFoundError, ValueError) as e:
        fail(f"Error loading tokens: {e}")

    console = Console()

    console.print(Panel(
        Text.assemble(
            ("Source: ", "dim"), (registry.source, "cyan"), "\n",
            ("Dark mode: ", "dim"), (registry.get_theme_mode().value, "cyan"), "\n",
            ("Content: ", "dim"), (", ".join(registry.get_content_globs()) or "none", "cyan"),
        ),
        title="Token Registry",
        border_style="blue",
    ))

    colors = Table(title="Colors", show_header=True, header_style="bold")
    colors.add_column("Token", style="cyan", min_width=15)
    colors.add_column("Value")
    colors.add_column("Swatch", width=6)
    for name, token in registry.get_color_extensions().items():
        if isinstance(token, dict):
            for shade, value in token.items():
                colors.add_row(f"{name}-{shade}", value, swatch(value))
        else:
            colors.add_row(name, token, swatch(token))
    console.print(colors)

    fonts = Table(title="Font Families", show_header=True, header_style="bold")
    fonts.add_column("Token", style="cyan", min_width=15)
    fonts.add_column("Stack")
    for name, stack in registry.get_font_extensions().items():
        fonts.add_row(name, ", ".join(stack))
    console.print(fonts)

    keyframes = registry.get_keyframe_extensions()
    animations = Table(title="Animations", show_header=True, header_style="bold")
    animations.add_column("Token", style="cyan", min_width=15)
    animations.add_column("Declaration")
    animations.add_column("Steps", style="magenta")
    for name, value in registry.get_animation_extensions().items():
        steps = [step for reference in get_keyframe_reference(value)
                 for step in keyframes.get(reference, {})]
        animations.add_row(name, value, " | ".join(steps) if steps else "-")
    console.print(animations)

    for scale_name in registry.get_scale_names():
        scale = Table(title=f"Scale: {scale_name}", show_header=True, header_style="bold")
        scale.add_column("Key", style="cyan")
        scale.add_column("Value")
        for key, value in registry.get_scale_extension(scale_name).items():
            scale.add_row(key, value)
        console.print(scale)


@cli.command()
@source_options
@click.option('--format', 'output_format', type=click.Choice(OUTPUT_FORMATS),
              help='Output format (defaults to config)')
@click.option('--base', 'base_theme', help='Base theme to merge onto')
@click.pass_obj
def resolve(config: ConfigModel, token_file: Optional[str], preset: Optional[str],
            output_format: Optional[str], base_theme: Optional[str]):
    """Print the theme produced by merging the tokens onto the base theme."""
    try:
        registry = load_registry(config, token_file, preset)
        engine = TokenEngine(registry, base_theme=base_theme or config.base_theme)
        resolved = engine.resolve()
    except (FileNotFoundError, ValueError) as e:
        fail(f"Error resolving tokens: {e}")

    click.echo(dump_document(resolved.to_document(), output_format or config.output_format))


@cli.command()
@source_options
@click.pass_obj
def validate(config: ConfigModel, token_file: Optional[str], preset: Optional[str]):
    """Check the resolved tokens for dangling references and malformed scales."""
    try:
        registry = load_registry(config, token_file, preset)
        warnings = TokenEngine(registry, base_theme=config.base_theme).validate()
    except (FileNotFoundError, ValueError) as e:
        fail(f"Invalid token configuration: {e}")

    console = Console()
    if not warnings:
        console.print(f"[green]✓ {registry.source}: no issues found[/green]", soft_wrap=True)
        return

    console.print(f"[yellow]{registry.source}: {len(warnings)} warning(s)[/yellow]", soft_wrap=True)
    for warning in warnings:
        console.print(f"  [yellow]•[/yellow] {warning}", highlight=False, soft_wrap=True)


@cli.command()
@click.argument('path')
@source_options
@click.pass_obj
def get(config: ConfigModel, path: str, token_file: Optional[str], preset: Optional[str]):
    """Print one resolved token, e.g. colors.sage.500"""
    try:
        registry = load_registry(config, token_file, preset)
        value = TokenEngine(registry, base_theme=config.base_theme).get_token(path)
    except KeyError:
        fail(f"Token '{path}' not found")
    except (FileNotFoundError, ValueError) as e:
        fail(f"Error resolving tokens: {e}")

    if isinstance(value, dict):
        click.echo(dump_document(value, config.output_format).rstrip())
    elif isinstance(value, list):
        click.echo(", ".join(value))
    else:
        click.echo(value)


@cli.command()
@source_options
@click.argument('output', type=click.Path(dir_okay=False))
@click.pass_obj
def export(config: ConfigModel, output: str, token_file: Optional[str], preset: Optional[str]):
    """Write the token document to OUTPUT (.yaml, .yml or .json)."""
    try:
        registry = load_registry(config, token_file, preset)
        registry.save(output)
    except (FileNotFoundError, ValueError) as e:
        fail(f"Error exporting tokens: {e}")

    Console().print(f"[green]✓ Exported {registry.source} to {output}[/green]", soft_wrap=True)


@cli.command()
def presets():
    """List built-in token presets and base themes."""
    console = Console()

    table = Table(title="Built-in Presets", show_header=True, header_style="bold")
    table.add_column("Name", style="cyan", min_width=15)
    table.add_column("Type", style="blue")

    for name in list_presets():
        table.add_row(name, "tokens")
    for name in list_base_themes():
        table.add_row(name, "base")

    console.print(table)


def main():
    """Entry point for the design-tokens command."""
    cli()


if __name__ == "__main__":
    main()
