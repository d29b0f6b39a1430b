"""
Filter preset CLI commands for PhotoEdit
"""

import click
import json
import logging
from pathlib import Path
from typing import Optional

from ..config import get_config_value
from ..errors import PhotoEditError
from ..io import load_image, save_image
from ..processing.filters import FilterPresetRegistry
from ..preview import PreviewGenerator

logger = logging.getLogger(__name__)


@click.command('filters')
@click.option('--json', 'as_json', is_flag=True, help='Print the catalog as JSON')
@click.pass_context
def filters_command(ctx, as_json: bool):
    """List available filter presets."""
    try:
        registry = FilterPresetRegistry.from_config(ctx.obj.get('config', {}))
    except PhotoEditError as e:
        raise click.ClickException(f"Invalid custom filter configuration: {e}")

    if as_json:
        click.echo(json.dumps(registry.to_catalog(), indent=2))
        return

    click.echo("Filter Presets:")
    click.echo("=" * 60)
    for preset in registry:
        settings = ", ".join(f"{name} {value:+g}" for name, value in preset.adjustments.items())
        click.echo(f"{preset.id:<12} {preset.name:<12} {settings or '(no changes)'}")


@click.command('previews')
@click.argument('input_path', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument('output_dir', type=click.Path(file_okay=False, path_type=Path))
@click.option('--size', type=click.IntRange(min=1), default=None,
              help='Thumbnail bounding box edge in pixels')
@click.option('--format', 'image_format', type=click.Choice(['png', 'jpg', 'webp']),
              default='png', help='Thumbnail file format')
@click.pass_context
def previews_command(ctx, input_path: Path, output_dir: Path, size: Optional[int],
                     image_format: str):
    """
    Render one preview thumbnail per filter preset.

    INPUT_PATH: Source image
    OUTPUT_DIR: Directory for <filter-id>.<format> thumbnails
    """
    config = ctx.obj.get('config', {})
    quiet = ctx.obj.get('quiet', False)
    if size is None:
        size = get_config_value(config, 'preview.thumbnail_size', 100)

    try:
        registry = FilterPresetRegistry.from_config(config)
        source = load_image(input_path)
        previews = PreviewGenerator(registry, thumbnail_size=size).generate(source)

        output_dir.mkdir(parents=True, exist_ok=True)
        for item in previews:
            save_image(item.preview, output_dir / f"{item.filter_id}.{image_format}")
    except PhotoEditError as e:
        raise click.ClickException(str(e))

    if not quiet:
        click.echo(f"✓ Wrote {len(previews)} previews to {output_dir}")
