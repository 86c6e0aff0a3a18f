"""Render a sphere scene to an image file.

Renders the reference six-sphere scene (or a scene loaded from a JSON file)
with the Whitted ray tracer and writes a PPM (or PNG) image.

Usage:
    whitted-render [options]

Options:
    --width WIDTH         Image width in pixels (default: 640)
    --height HEIGHT       Image height in pixels (default: 480)
    --fov FOV             Vertical field of view in degrees (default: 30)
    --scene SCENE         JSON scene file (default: built-in reference scene)
    --output OUTPUT       Output file path, .ppm or .png (default: out.ppm)
    --backend BACKEND     taichi (parallel kernel) or python (reference tracer)
    --arch ARCH           Taichi backend: cpu, gpu or cuda (default: cpu)
    --batch-rows ROWS     Rows per progress update (default: 48)
    --quiet               Suppress progress output

Example:
    whitted-render --width 320 --height 240 --output spheres.png
"""

from __future__ import annotations

import argparse
import sys
import time
from collections.abc import Sequence
from pathlib import Path

from whitted.camera.pinhole import DEFAULT_FOV, DEFAULT_HEIGHT, DEFAULT_WIDTH, PinholeCamera
from whitted.core.runtime import ARCHS

BACKENDS = ("taichi", "python")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a sphere scene with the Whitted ray tracer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=DEFAULT_WIDTH,
        help=f"Image width in pixels (default: {DEFAULT_WIDTH})",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=DEFAULT_HEIGHT,
        help=f"Image height in pixels (default: {DEFAULT_HEIGHT})",
    )
    parser.add_argument(
        "--fov",
        type=float,
        default=DEFAULT_FOV,
        help=f"Vertical field of view in degrees (default: {DEFAULT_FOV:g})",
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="JSON scene file (default: built-in reference scene)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="out.ppm",
        help="Output file path, .ppm or .png (default: out.ppm)",
    )
    parser.add_argument(
        "--backend",
        choices=BACKENDS,
        default="taichi",
        help="Rendering backend (default: taichi)",
    )
    parser.add_argument(
        "--arch",
        choices=sorted(ARCHS),
        default="cpu",
        help="Taichi backend architecture (default: cpu)",
    )
    parser.add_argument(
        "--batch-rows",
        type=int,
        default=48,
        help="Rows per progress update (default: 48)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args(argv)


def render_scene(
    camera: PinholeCamera,
    scene_path: str | None = None,
    output_path: str = "out.ppm",
    backend: str = "taichi",
    arch: str = "cpu",
    batch_rows: int = 48,
    quiet: bool = False,
) -> Path:
    """Render a scene and save it to a file.

    Args:
        camera: The camera (image size and field of view).
        scene_path: JSON scene file, or None for the reference scene.
        output_path: Output file path (.ppm or .png).
        backend: "taichi" for the parallel kernel, "python" for the
            reference tracer.
        arch: Taichi architecture name (taichi backend only).
        batch_rows: Number of rows between progress updates.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.

    Raises:
        ValueError: If the backend is unknown or the scene file is invalid.
        OSError: If the scene cannot be read or the image cannot be written.
    """
    from whitted.scene.config import load_scene
    from whitted.scene.reference import create_reference_scene

    if backend not in BACKENDS:
        raise ValueError(f"Unknown backend: {backend!r} (expected one of {BACKENDS})")
    if batch_rows <= 0:
        raise ValueError(f"batch_rows must be positive, got {batch_rows}")

    spheres = load_scene(scene_path) if scene_path else create_reference_scene()
    if not quiet:
        source = scene_path or "reference scene"
        print(
            f"Rendering {len(spheres)} spheres from {source} "
            f"({camera.width}x{camera.height})..."
        )

    start_time = time.time()

    def progress_callback(done: int, total: int) -> None:
        if not quiet:
            elapsed = time.time() - start_time
            progress_pct = (done / total) * 100 if total > 0 else 0
            print(
                f"\r  Progress: {done}/{total} rows ({progress_pct:.1f}%) - {elapsed:.1f}s",
                end="",
                flush=True,
            )

    output_file = Path(output_path)
    if backend == "taichi":
        # Lazy imports: the integrator declares fields and needs Taichi initialized
        from whitted.core.runtime import init_taichi

        init_taichi(arch)
        from whitted.core.renderer import Renderer

        renderer = Renderer(spheres, camera)
        renderer.render(batch_rows=batch_rows, callback=progress_callback)
        renderer.save(output_file)
    else:
        from whitted.core.tracer import render_reference
        from whitted.preview.export import save_image

        def row_callback(done: int, total: int) -> None:
            if done % batch_rows == 0 or done == total:
                progress_callback(done, total)

        image = render_reference(spheres, camera, callback=row_callback)
        save_image(image, output_file)

    if not quiet:
        print()  # Newline after progress
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {time.time() - start_time:.2f}s")

    return output_file


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    try:
        camera = PinholeCamera(width=args.width, height=args.height, fov=args.fov)
        render_scene(
            camera,
            scene_path=args.scene,
            output_path=args.output,
            backend=args.backend,
            arch=args.arch,
            batch_rows=args.batch_rows,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
