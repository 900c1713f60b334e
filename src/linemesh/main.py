"""Main entry point for linemesh."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import numpy as np

from .core.buffer import RenderBuffer
from .core.errors import LineMeshError, MeshValidationError
from .decode import convert_each, prepare
from .logging_config import setup_logging
from .sources import DescriptionLoader

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="linemesh",
        description="Linemesh - convert line mesh descriptions into render buffers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "description",
        metavar="PATH",
        help="Mesh description (.lua, .yaml or .yml)",
    )
    parser.add_argument(
        "-m", "--mesh",
        type=int,
        action="append",
        metavar="INDEX",
        help="0-based mesh to convert, may be repeated (default: all)",
    )
    parser.add_argument(
        "--transitive",
        action="store_true",
        help="Follow chains of references instead of a single hop",
    )
    parser.add_argument(
        "--skip-invalid",
        action="store_true",
        help="Leave out meshes that fail validation instead of aborting",
    )
    parser.add_argument(
        "-j", "--jobs",
        type=int,
        default=None,
        help="Convert meshes on this many threads",
    )
    parser.add_argument(
        "--save",
        metavar="PATH",
        help="Write positions and colors to an .npz file",
    )
    parser.add_argument(
        "-r", "--render",
        metavar="PATH",
        help="Render the buffer to an image file and quit",
    )
    parser.add_argument(
        "--resolution",
        metavar="WxH",
        default="1920x1080",
        help="Render resolution (default: 1920x1080)",
    )
    parser.add_argument(
        "--camera",
        metavar="X,Y,Z",
        help="Camera position (default: auto-fit to the buffer)",
    )
    parser.add_argument(
        "--target",
        metavar="X,Y,Z",
        help="Camera target/look-at point (default: buffer center)",
    )
    parser.add_argument(
        "--fov",
        type=float,
        default=45.0,
        help="Camera field of view in degrees (default: 45)",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Open the interactive preview",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log debug output",
    )
    return parser.parse_args(argv)


def _parse_vector(text: str | None) -> np.ndarray | None:
    if text is None:
        return None
    try:
        vector = np.array([float(x) for x in text.split(",")])
    except ValueError:
        raise ValueError(f"invalid point '{text}', expected X,Y,Z") from None
    if vector.shape != (3,):
        raise ValueError(f"invalid point '{text}', expected X,Y,Z")
    return vector


def _parse_resolution(text: str) -> tuple[int, int]:
    try:
        width, height = map(int, text.lower().split("x"))
    except ValueError:
        raise ValueError(f"invalid resolution '{text}', expected WxH") from None
    if width <= 0 or height <= 0:
        raise ValueError(f"invalid resolution '{text}', expected WxH")
    return width, height


def main(argv: list[str] | None = None) -> int:
    """Run the linemesh converter.

    Returns:
        Process exit status
    """
    args = parse_args(argv)
    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        width, height = _parse_resolution(args.resolution)
        camera = _parse_vector(args.camera)
        target = _parse_vector(args.target)
        collection = DescriptionLoader().load(args.description)
        prepared = prepare(collection, transitive=args.transitive)
        indices = args.mesh if args.mesh is not None else list(range(len(prepared)))
        results = convert_each(prepared, indices=indices, max_workers=args.jobs)
    except (LineMeshError, IndexError, ValueError, OSError) as e:
        logger.error(str(e))
        return 1

    print("Linemesh - Line Mesh Converter")
    print("=" * 40)
    print(f"Description contains {len(prepared)} meshes:")

    buffers: list[RenderBuffer] = []
    failed = False
    for mesh_index, result in zip(indices, results):
        mesh = prepared[mesh_index]
        colored = "colored" if mesh.colors is not None else "no colors"
        if isinstance(result, MeshValidationError):
            print(f"  - mesh {mesh_index}: INVALID ({result.detail})")
            failed = True
            continue
        print(
            f"  - mesh {mesh_index}: {mesh.vertex_count} vertexes, "
            f"{len(mesh.segments)} segments, {result.edge_count} edges ({colored})"
        )
        buffers.append(result)

    if failed and not args.skip_invalid:
        logger.error("Some meshes failed validation (use --skip-invalid to leave them out)")
        return 1

    buffer = RenderBuffer.concatenate(buffers)
    print(f"Buffer: {buffer.vertex_count} endpoints, {buffer.edge_count} edges")

    if args.save:
        output_path = Path(args.save)
        np.savez(output_path, positions=buffer.positions, colors=buffer.colors)
        print(f"Saved buffer to {output_path}")

    if args.render:
        from PIL import Image

        from .viewer import render_buffer

        output_path = Path(args.render)
        print(f"\nRendering to {output_path} ({width}x{height})...")
        color = render_buffer(
            buffer,
            width=width,
            height=height,
            fov=args.fov,
            camera=camera,
            target=target,
        )
        Image.fromarray(color).save(str(output_path))
        print(f"Saved render to {output_path}")
    elif args.show:
        from .viewer import Viewer

        print("\nOpening viewer...")
        print("Controls: Left-drag to rotate, scroll to zoom, right-drag to pan")
        names = [f"mesh_{i}" for i, r in zip(indices, results) if isinstance(r, RenderBuffer)]
        Viewer(buffers, names=names).show()

    return 0


if __name__ == "__main__":
    sys.exit(main())
