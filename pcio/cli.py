#!/usr/bin/env python3
"""pcio CLI - build playingcards.io asset bundles."""

import logging
from pathlib import Path

import click

from pcio import __version__
from pcio.errors import PcioError

logger = logging.getLogger(__name__)

project_dir_option = click.option(
    "--project-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Directory holding template.json, images/, rules.md and fonts/",
)


def _run(step, *args, **kwargs):
    """Run a build step, turning failures into a click error (exit status 1)."""
    try:
        return step(*args, **kwargs)
    except (PcioError, OSError) as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Log every file written")
def cli(verbose):
    """pcio - package a card game for playingcards.io.

    Render the rules document into page images and bundle the widget
    template with all images into a .pcio archive.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


@cli.command()
@project_dir_option
@click.option("--rules/--no-rules", "with_rules", default=None,
              help="Render rules.md first (default: only when rules.md exists)")
@click.option("--output", type=click.Path(dir_okay=False, path_type=Path), help="Archive path")
def build(project_dir, with_rules, output):
    """Render rules pages, then package everything."""
    from pcio.build import run_build
    from pcio.config import BuildConfig

    config = _run(BuildConfig.load, project_dir, output=output)
    result = _run(run_build, config, with_rules=with_rules)
    click.echo(f"{result.output_path} ({result.asset_count} assets)")


@cli.command()
@project_dir_option
@click.option("--template", type=click.Path(dir_okay=False, path_type=Path), help="Template JSON file")
@click.option("--images", type=click.Path(file_okay=False, path_type=Path), help="Images directory")
@click.option("--output", type=click.Path(dir_okay=False, path_type=Path), help="Archive path")
def package(project_dir, template, images, output):
    """Package template.json and images/ without rendering rules."""
    from pcio.config import BuildConfig
    from pcio.packager import package_assets

    config = _run(BuildConfig.load, project_dir, template=template, images_dir=images, output=output)
    result = _run(package_assets, config.template, config.images_dir, config.output)
    click.echo(f"{result.output_path} ({result.asset_count} assets)")


@cli.command()
@project_dir_option
@click.option("--rules-file", type=click.Path(dir_okay=False, path_type=Path), help="Markdown rules source")
@click.option("--images", type=click.Path(file_okay=False, path_type=Path), help="Output directory for pages")
def rules(project_dir, rules_file, images):
    """Render rules.md into images/rules_<n>.svg."""
    from pcio.config import BuildConfig
    from pcio.rules.renderer import render_rules_for_config

    config = _run(BuildConfig.load, project_dir, rules=rules_file, images_dir=images)
    written = _run(render_rules_for_config, config)
    click.echo(f"Rendered {len(written)} page(s) into {config.images_dir}")


@cli.command()
@click.argument("archive", type=click.Path(dir_okay=False, path_type=Path))
def inspect(archive):
    """List the entries of a .pcio archive."""
    from pcio.packager import read_archive_entries

    entries = _run(read_archive_entries, archive)
    for name, data in entries.items():
        click.echo(f"{len(data):>10}  {name}")
    click.echo(f"{len(entries)} entries")


if __name__ == "__main__":
    cli()
