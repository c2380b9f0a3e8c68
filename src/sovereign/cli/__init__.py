"""CLI entry point — Click group with global options."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from sovereign import __version__
from sovereign.config import SovereignConfig
from sovereign.scanner.loader import load_registry
from sovereign.scanner.patterns import DEFAULT_REGISTRY, Registry


@click.group()
@click.version_option(version=__version__, prog_name="sovereign")
@click.option(
    "--registry",
    "-r",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to a YAML registry extension.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.pass_context
def main(ctx: click.Context, registry: str | None, verbose: bool) -> None:
    """Sovereign — find and strip proprietary code-generator lock-in."""
    ctx.ensure_object(dict)

    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    config = SovereignConfig.load()
    config.verbose = verbose
    if registry:
        config.registry_paths.append(Path(registry))
    ctx.obj["config"] = config
    ctx.obj["registry"] = _load_registries(config)


def _load_registries(config: SovereignConfig) -> Registry:
    registry = DEFAULT_REGISTRY
    for path in config.registry_paths:
        try:
            registry = load_registry(path, base=registry)
        except (OSError, ValueError) as e:
            raise click.BadParameter(
                f"{path}: {e}", param_hint="'--registry'"
            ) from e
    return registry


def _register_commands() -> None:
    from sovereign.cli.clean import clean  # noqa: F811
    from sovereign.cli.scan import audit, scan  # noqa: F811
    from sovereign.cli.validate import validate  # noqa: F811

    main.add_command(scan)
    main.add_command(audit)
    main.add_command(clean)
    main.add_command(validate)


_register_commands()
