#!/usr/bin/env python3
"""Export the reference scene to JSON, then render it from the file.

This example shows the scene file round trip and the generator-based
progress API of the Renderer.

Usage:
    python examples/render_scene_json.py [--output OUTPUT] [--scene SCENE]

Example:
    python examples/render_scene_json.py --output spheres.png
"""

from __future__ import annotations

import argparse
import time


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Write the reference scene to JSON and render it.",
    )
    parser.add_argument(
        "--scene",
        type=str,
        default="reference_scene.json",
        help="JSON file to write the scene to (default: reference_scene.json)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="out.ppm",
        help="Output image, .ppm or .png (default: out.ppm)",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()

    from whitted.core.runtime import init_taichi

    init_taichi("cpu")

    from whitted.camera.pinhole import PinholeCamera
    from whitted.core.renderer import Renderer
    from whitted.scene.config import load_scene, save_scene
    from whitted.scene.reference import create_reference_scene

    save_scene(create_reference_scene(), args.scene)
    spheres = load_scene(args.scene)
    print(f"Wrote {len(spheres)} spheres to {args.scene}")

    renderer = Renderer(spheres, PinholeCamera())
    start_time = time.time()
    for done, total in renderer.render_progressive(batch_rows=60):
        print(f"\r  Rows: {done}/{total}", end="", flush=True)
    print()

    renderer.save(args.output)
    print(f"Saved {args.output} in {time.time() - start_time:.2f}s")


if __name__ == "__main__":
    main()
