"""Command-line entry point: render a scene to a PPM or PNG file.

Usage:
    glint [options]
    python -m glint [options]

Options:
    --width WIDTH           Image width in pixels (default: 400)
    --aspect-ratio RATIO    Width / height, e.g. 1.7778 or 16:9 (default: 16:9)
    --samples SAMPLES       Samples per pixel (default: 100)
    --max-depth DEPTH       Bounce budget per primary ray (default: 50)
    --seed SEED             Random seed (default: 0)
    --scene SCENE           Preset name, "gradient" or path to a JSON scene
    --output OUTPUT         Output file, .ppm or .png (default: image.ppm)
    --gamma GAMMA           Output gamma (default: none, linear output)
    --arch ARCH             Taichi backend (default: cpu)
    --batch-size SIZE       Samples per progress update (default: 10)
    --quiet                 Suppress progress output
    -v, --verbose           Verbose logging

Example:
    glint --width 400 --samples 50 --scene random_spheres --output cover.png
"""

import argparse
import logging
import sys
import time
from pathlib import Path

import taichi as ti

from glint.config import ARCH_CHOICES, MAX_DEPTH, RenderConfig

logger = logging.getLogger(__name__)

# Preset names (mirrors glint.scene.presets.PRESETS, which needs ti.init first)
SCENE_PRESETS = ("single_sphere", "three_spheres", "random_spheres")

# Writes the test pattern instead of rendering
GRADIENT_SCENE = "gradient"


def parse_aspect_ratio(value: str) -> float:
    """Parse an aspect ratio given as a number or as ``W:H``."""
    try:
        if ":" in value:
            width, height = value.split(":", 1)
            ratio = float(width) / float(height)
        else:
            ratio = float(value)
    except (ValueError, ZeroDivisionError) as e:
        raise argparse.ArgumentTypeError(f"invalid aspect ratio: {value!r}") from e
    if ratio <= 0.0:
        raise argparse.ArgumentTypeError(f"aspect ratio must be positive: {value!r}")
    return ratio


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="glint",
        description="Render a scene of spheres with a Monte Carlo path tracer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=400,
        help="Image width in pixels (default: 400)",
    )
    parser.add_argument(
        "--aspect-ratio",
        type=parse_aspect_ratio,
        default=16.0 / 9.0,
        help="Width / height, as a number or W:H (default: 16:9)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=100,
        help="Number of samples per pixel (default: 100)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=MAX_DEPTH,
        help=f"Bounce budget per primary ray (default: {MAX_DEPTH})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Random seed for sampling and the random_spheres layout (default: 0)",
    )
    parser.add_argument(
        "--scene",
        type=str,
        default="three_spheres",
        help=(
            f"Scene preset ({', '.join(SCENE_PRESETS)}), '{GRADIENT_SCENE}' "
            "for a test pattern, or a JSON scene file (default: three_spheres)"
        ),
    )
    parser.add_argument(
        "--output",
        type=str,
        default="image.ppm",
        help="Output file path, .ppm or .png (default: image.ppm)",
    )
    parser.add_argument(
        "--gamma",
        type=float,
        default=None,
        help="Output gamma, e.g. 2.0 (default: none, linear output)",
    )
    parser.add_argument(
        "--arch",
        choices=ARCH_CHOICES,
        default="cpu",
        help="Taichi backend (default: cpu)",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=10,
        help="Samples per progress update (default: 10)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose logging",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> RenderConfig:
    """Build and validate a RenderConfig from parsed arguments.

    Raises:
        ValueError: If any setting is out of range.
    """
    config = RenderConfig(
        image_width=args.width,
        aspect_ratio=args.aspect_ratio,
        samples_per_pixel=args.samples,
        max_depth=args.max_depth,
        seed=args.seed,
        arch=args.arch,
        gamma=args.gamma,
    )
    config.validate()
    return config


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr; DEBUG when verbose, WARNING otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def init_taichi(config: RenderConfig) -> None:
    """Initialize Taichi with the configured backend and random seed.

    GPU backends fall back to the CPU when unavailable.
    """
    try:
        ti.init(arch=getattr(ti, config.arch), random_seed=config.seed)
    except Exception:
        if config.arch == "cpu":
            raise
        logger.warning("Backend '%s' unavailable, falling back to CPU", config.arch)
        ti.init(arch=ti.cpu, random_seed=config.seed)


def write_gradient(config: RenderConfig, output_path: str) -> Path:
    """Write the gradient test pattern at the configured size."""
    from glint.output.export import save_image
    from glint.output.ppm import gradient_image

    return save_image(gradient_image(config.image_width, config.image_height), output_path)


def render_scene(
    config: RenderConfig,
    scene_name: str,
    output_path: str,
    batch_size: int = 10,
    quiet: bool = False,
) -> Path:
    """Build a scene, render it and save the image.

    Taichi must already be initialized.

    Args:
        config: Validated render configuration.
        scene_name: Preset name or path to a JSON scene file.
        output_path: Output file path (.ppm or .png).
        batch_size: Number of samples to render between progress updates.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.

    Raises:
        ValueError: If the scene or output format is invalid.
    """
    # Lazy imports so Taichi fields are allocated after ti.init()
    from glint.camera.camera import setup_camera
    from glint.core.renderer import Renderer
    from glint.scene.manager import load_scene
    from glint.scene.presets import create_preset_scene

    if scene_name in SCENE_PRESETS:
        scene, camera = create_preset_scene(
            scene_name, aspect_ratio=config.aspect_ratio, seed=config.seed
        )
    else:
        scene, camera = load_scene(scene_name)
        camera.aspect_ratio = config.aspect_ratio

    setup_camera(camera)

    if not quiet:
        print(
            f"Rendering '{scene_name}' ({scene.get_sphere_count()} spheres) at "
            f"{config.image_width}x{config.image_height}, "
            f"{config.samples_per_pixel} samples per pixel...",
            file=sys.stderr,
        )

    renderer = Renderer.from_config(config)
    start_time = time.time()

    def progress_callback(current: int, target: int) -> None:
        if not quiet:
            elapsed = time.time() - start_time
            progress_pct = (current / target) * 100 if target > 0 else 0
            samples_per_sec = current / elapsed if elapsed > 0 else 0
            print(
                f"\r  Progress: {current}/{target} samples "
                f"({progress_pct:.1f}%) - {samples_per_sec:.1f} spp/s",
                end="",
                file=sys.stderr,
                flush=True,
            )

    renderer.render(
        num_samples=config.samples_per_pixel,
        batch_size=batch_size,
        callback=progress_callback,
    )

    if not quiet:
        print(file=sys.stderr)

    output_file = renderer.save_image(output_path)

    if not quiet:
        print(f"Saved to: {output_file.absolute()}", file=sys.stderr)
        print(f"Total time: {time.time() - start_time:.2f}s", file=sys.stderr)

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = build_config(args)
        if args.batch_size <= 0:
            raise ValueError(f"batch_size = {args.batch_size} must be positive")

        if args.scene == GRADIENT_SCENE:
            write_gradient(config, args.output)
            return 0

        init_taichi(config)
        render_scene(
            config,
            args.scene,
            args.output,
            batch_size=args.batch_size,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        logger.debug("Render failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
