# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import asyncio
from pathlib import Path

import click
import yaml

from craftbot.config import BotConfig, load_config
from craftbot.errors import ConfigError
from craftbot.logging import configure_logging, get_logger
from craftbot.settings import Settings

logger = get_logger(__name__)


def _load(settings: Settings, config_path: Path | None) -> BotConfig:
    path = config_path or settings.config_path
    if config_path is None and not path.exists():
        logger.info("config_default", path=str(path))
        return BotConfig()
    try:
        return load_config(path)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
def cli() -> None:
    """craftbot command line interface."""


@cli.command("run")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="YAML configuration file (defaults to the user config directory).",
)
def run(config_path: Path | None) -> None:
    """Run every configured agent until interrupted."""
    from craftbot.core.fleet import FleetManager

    settings = Settings()
    configure_logging(settings)
    config = _load(settings, config_path)
    fleet = FleetManager(config, password=settings.bot_password)

    async def _run() -> None:
        try:
            await fleet.run()
        finally:
            await fleet.stop()

    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        logger.info("interrupted")


@cli.command("init-config")
@click.argument("path", required=False, type=click.Path(dir_okay=False, path_type=Path))
@click.option("--force", is_flag=True, help="Overwrite an existing file.")
def init_config(path: Path | None, force: bool) -> None:
    """Write the default configuration as YAML."""
    target = path or Settings().config_path
    if target.exists() and not force:
        raise click.ClickException(f"{target} already exists (use --force to overwrite)")
    BotConfig().to_yaml(target)
    click.echo(str(target))


@cli.command("show-config")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="YAML configuration file (defaults to the user config directory).",
)
def show_config(config_path: Path | None) -> None:
    """Print the effective configuration."""
    config = _load(Settings(), config_path)
    click.echo(yaml.dump(config.model_dump(mode="json"), default_flow_style=False, sort_keys=False, allow_unicode=True))


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
