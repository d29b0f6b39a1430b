"""
Editing CLI commands for PhotoEdit

Provides single-image editing and batch preset application.
"""

import click
import logging
import time
from pathlib import Path
from typing import Optional

from tqdm import tqdm

from ..config import get_config_value
from ..errors import PhotoEditError, InvalidParameter
from ..io import load_image, save_image, find_images
from ..processing.adjustments import ADJUSTMENT_RANGES
from ..processing.filters import FilterPresetRegistry
from ..processing.geometry import CropArea
from ..processing.history import EditSession
from ..utils.logging import BatchStats

logger = logging.getLogger(__name__)


def parse_crop(value: Optional[str]) -> Optional[CropArea]:
    """Parse an ``x,y,width,height`` crop option."""
    if not value:
        return None
    parts = value.split(',')
    if len(parts) != 4:
        raise click.BadParameter("expected x,y,width,height", param_hint='--crop')
    try:
        x, y, width, height = (int(part.strip()) for part in parts)
    except ValueError:
        raise click.BadParameter("crop values must be integers", param_hint='--crop')
    try:
        return CropArea(x=x, y=y, width=width, height=height)
    except InvalidParameter as e:
        raise click.BadParameter(str(e), param_hint='--crop')


def adjustment_options(func):
    """Add one ``--<field>`` option per adjustment field."""
    for name, (min_val, max_val) in reversed(list(ADJUSTMENT_RANGES.items())):
        func = click.option(
            f'--{name}', type=click.FloatRange(min_val, max_val), default=None,
            help=f'{name.capitalize()} ({min_val:g} to {max_val:g})',
        )(func)
    return func


def _build_registry(ctx) -> FilterPresetRegistry:
    try:
        return FilterPresetRegistry.from_config(ctx.obj.get('config', {}))
    except PhotoEditError as e:
        raise click.ClickException(f"Invalid custom filter configuration: {e}")


@click.command('apply')
@click.argument('input_path', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument('output_path', type=click.Path(dir_okay=False, path_type=Path))
@click.option('--filter', '-f', 'filter_id', help='Filter preset id to apply first')
@adjustment_options
@click.option('--rotate', '-r', type=float, default=0.0, help='Rotation in degrees (clockwise)')
@click.option('--flip-h', is_flag=True, help='Flip horizontally')
@click.option('--flip-v', is_flag=True, help='Flip vertically')
@click.option('--scale', '-s', type=float, default=1.0, help='Scale factor (> 0)')
@click.option('--crop', help='Crop rectangle x,y,width,height (after transform)')
@click.option('--quality', type=click.IntRange(1, 100), default=None, help='JPEG/WebP quality')
@click.option('--seed', type=int, default=None, help='Grain seed')
@click.option('--history', 'history_path', type=click.Path(dir_okay=False, path_type=Path),
              help='Write the edit history to this JSON file')
@click.pass_context
def apply_command(ctx, input_path: Path, output_path: Path, filter_id: Optional[str],
                  rotate: float, flip_h: bool, flip_v: bool, scale: float,
                  crop: Optional[str], quality: Optional[int], seed: Optional[int],
                  history_path: Optional[Path], **adjustment_values):
    """
    Edit a single image.

    Steps are applied as separate history entries: filter, adjustments,
    transform, crop.

    INPUT_PATH: Image to edit
    OUTPUT_PATH: Destination file (format from extension)
    """
    config = ctx.obj.get('config', {})
    quiet = ctx.obj.get('quiet', False)

    crop_area = parse_crop(crop)
    registry = _build_registry(ctx)
    if seed is None:
        seed = get_config_value(config, 'editor.seed', 0)
    if quality is None:
        quality = get_config_value(config, 'output.jpeg_quality', 90)

    try:
        original = load_image(input_path)
        session = EditSession(original, registry=registry, seed=seed,
                              max_history=get_config_value(config, 'editor.max_history'))

        if filter_id:
            registry.require(filter_id)
            session.apply_filter(filter_id)
            session.commit(f"Apply filter {filter_id}")

        changes = {name: value for name, value in adjustment_values.items() if value is not None}
        if changes:
            session.update_adjustments(**changes)
            session.commit("Adjust " + ", ".join(sorted(changes)))

        if rotate or flip_h or flip_v or scale != 1.0:
            if rotate:
                session.rotate(rotate)
            if flip_h:
                session.flip_horizontal()
            if flip_v:
                session.flip_vertical()
            if scale != 1.0:
                session.set_scale(scale)
            session.commit("Transform")

        if crop_area is not None:
            session.set_crop(crop_area)
            session.commit("Crop")

        result = session.current_image
        save_image(result, output_path,
                   image_format=get_config_value(config, 'output.format'),
                   quality=quality)

        if history_path:
            session.export_history(history_path)

    except (PhotoEditError, OSError) as e:
        raise click.ClickException(str(e))

    if not quiet:
        click.echo(f"✓ Saved {result.width}x{result.height} image to {output_path} "
                   f"({len(session.history)} edit(s))")


@click.command('batch')
@click.argument('input_dir', type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument('output_dir', type=click.Path(file_okay=False, path_type=Path))
@click.option('--filter', '-f', 'filter_id', required=True, help='Filter preset id')
@click.option('--suffix', default='', help='Suffix added to output file names')
@click.option('--quality', type=click.IntRange(1, 100), default=None, help='JPEG/WebP quality')
@click.pass_context
def batch_command(ctx, input_dir: Path, output_dir: Path, filter_id: str,
                  suffix: str, quality: Optional[int]):
    """
    Apply a filter preset to every image in a directory.

    INPUT_DIR: Directory of images
    OUTPUT_DIR: Directory for results (created if missing)
    """
    config = ctx.obj.get('config', {})
    quiet = ctx.obj.get('quiet', False)

    registry = _build_registry(ctx)
    try:
        registry.require(filter_id)
    except PhotoEditError as e:
        raise click.ClickException(str(e))

    if quality is None:
        quality = get_config_value(config, 'output.jpeg_quality', 90)

    images = find_images(input_dir)
    if not images:
        click.echo(f"No images found in {input_dir}")
        return

    output_dir.mkdir(parents=True, exist_ok=True)
    stats = BatchStats(total=len(images))

    for image_path in tqdm(images, desc=f"Applying {filter_id}", unit="image", disable=quiet):
        target = output_dir / f"{image_path.stem}{suffix}{image_path.suffix}"
        start_time = time.time()
        try:
            session = EditSession(load_image(image_path), registry=registry,
                                  seed=get_config_value(config, 'editor.seed', 0))
            session.apply_filter(filter_id)
            session.commit(f"Apply filter {filter_id}")
            save_image(session.current_image, target, quality=quality)
        except PhotoEditError as e:
            logger.error(f"Failed to process {image_path}: {e}")
            stats.add_error(image_path.name, str(e))
            continue
        stats.add_result(time.time() - start_time)

    summary = stats.get_summary()
    logger.info(f"Batch finished in {summary['elapsed_time']:.1f}s "
                f"({summary['average_time_per_image']:.3f}s per image)")
    if not quiet:
        click.echo(f"✓ Processed {stats.processed_images}/{stats.total_images} images into {output_dir}")

    if stats.errors:
        failed = ', '.join(error['file'] for error in stats.errors)
        raise click.ClickException(f"{stats.failed_images} image(s) failed: {failed}")
