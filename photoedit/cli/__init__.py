"""
PhotoEdit Command Line Interface

Applies adjustments, transforms, crops and filter presets to image files.
"""

import click
import logging
from typing import Optional

from photoedit import __version__
from photoedit.config import load_config, get_config_value
from photoedit.utils.logging import setup_console_logging
from photoedit.cli.edit_commands import apply_command, batch_command
from photoedit.cli.filter_commands import filters_command, previews_command

logger = logging.getLogger(__name__)


@click.group()
@click.option('--config', '-c', type=click.Path(exists=True, dir_okay=False),
              help='Configuration file path')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--quiet', '-q', is_flag=True, help='Suppress non-error output')
@click.version_option(version=__version__)
@click.pass_context
def main(ctx, config: Optional[str] = None, verbose: bool = False, quiet: bool = False):
    """
    PhotoEdit - non-destructive image editing from the command line

    Apply color adjustments, rotation, flips, crops and filter presets to
    images, or render preview thumbnails for every preset.
    """

    # Ensure context object exists
    if ctx.obj is None:
        ctx.obj = {}

    ctx.obj['config'] = load_config(config)

    level = get_config_value(ctx.obj['config'], 'logging.level', 'INFO')
    if verbose:
        level = 'DEBUG'
    elif quiet:
        level = 'ERROR'
    setup_console_logging(
        level=level,
        color=get_config_value(ctx.obj['config'], 'logging.color', True),
        fmt=get_config_value(ctx.obj['config'], 'logging.format',
                             '%(asctime)s - %(name)s - %(levelname)s - %(message)s'),
    )

    # Store CLI options in context
    ctx.obj['verbose'] = verbose
    ctx.obj['quiet'] = quiet


main.add_command(apply_command)
main.add_command(batch_command)
main.add_command(filters_command)
main.add_command(previews_command)


__all__ = ['main']
