"""
Entry point for running backdrop as a module.

Usage:
    python -m backdrop --help
    python -m backdrop demo
    python -m backdrop process image.png --threshold 30
    python -m backdrop edges image.png edges.png
"""

import argparse
import sys

from .errors import BackdropError


def build_parser():
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        description="Backdrop: edge-seeded background removal for RGBA images.",
        prog="python -m backdrop"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Demo command
    demo_parser = subparsers.add_parser("demo", help="Run a demonstration on a synthetic image")
    demo_parser.add_argument("--output", help="Where to save the demo result")

    # Process command
    process_parser = subparsers.add_parser("process", help="Remove the background of an image")
    process_parser.add_argument("input", help="Path to the input image")
    process_parser.add_argument("-o", "--output", help="Output image path")
    process_parser.add_argument("--config", help="Path to configuration file")
    process_parser.add_argument("--process", help="Name of the process in the configuration file")
    process_parser.add_argument("--threshold", type=float, help="Edge threshold (0-255)")
    process_parser.add_argument("--strip-height", type=int, help="Rows per strip")
    process_parser.add_argument("--timeout", type=float, help="Seconds to wait for each strip, 0 disables the limit")
    process_parser.add_argument("--executor", choices=["thread", "process"], help="Worker type")
    process_parser.add_argument("--quiet", action="store_true", help="Hide the progress bar")

    # Edges command
    edges_parser = subparsers.add_parser("edges", help="Write the edge mask of an image")
    edges_parser.add_argument("input", help="Path to the input image")
    edges_parser.add_argument("output", help="Path of the mask image to write")
    edges_parser.add_argument("--threshold", type=float, default=30, help="Edge threshold (0-255)")
    edges_parser.add_argument("--chunk-size", type=int, default=1024, help="Block size for chunked evaluation")

    # Config command
    config_parser = subparsers.add_parser("config", help="Configuration file management")
    config_subparsers = config_parser.add_subparsers(dest="config_action", help="Config actions")

    create_config_parser = config_subparsers.add_parser("create", help="Create a new configuration file")
    create_config_parser.add_argument("path", help="Path where to create the config file")
    create_config_parser.add_argument("--template", help="Template to use", default="config.yaml")

    config_subparsers.add_parser("templates", help="List available configuration templates")

    # Version command
    subparsers.add_parser("version", help="Show version information")

    return parser

def main(argv=None):
    """Main entry point for the backdrop package."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "demo":
        run_demo(args.output)
    elif args.command == "process":
        run_process(args)
    elif args.command == "edges":
        run_edges(args.input, args.output, args.threshold, args.chunk_size)
    elif args.command == "config":
        manage_config(args.config_action, getattr(args, 'path', None), getattr(args, 'template', None))
    elif args.command == "version":
        show_version()
    else:
        parser.print_help()

def run_demo(output_path=None):
    """Run a demonstration of backdrop functionality."""
    print("Running backdrop demonstration...")

    try:
        import numpy as np
        from . import Backdrop

        print("Using synthetic demo data...")
        # White page with a dark frame and a grey disc inside it
        data = np.full((240, 320, 4), 255, dtype=np.uint8)
        data[20:220, 20:24, :3] = 0
        data[20:220, 296:300, :3] = 0
        data[20:24, 20:300, :3] = 0
        data[216:220, 20:300, :3] = 0
        yy, xx = np.mgrid[0:240, 0:320]
        disc = (yy - 120) ** 2 + (xx - 160) ** 2 < 50 ** 2
        data[disc, :3] = 96

        bd = Backdrop.from_array(data, strip_height=80)
        result = bd.remove_background(progress_callback=lambda p: print(f"Processing: {p}%"))

        transparent = int((result[..., 3] == 0).sum())
        print(f"Cleared {transparent} of {result.shape[0] * result.shape[1]} pixels")
        if output_path:
            print(f"Results saved to: {bd.save(output_path)}")
        print("Demo completed successfully!")

    except (BackdropError, ValueError, OSError) as e:
        print(f"Demo failed: {e}")
        sys.exit(1)

def run_process(args):
    """Remove the background of an image file."""
    print(f"Processing: {args.input}")

    try:
        from . import Backdrop

        bd = Backdrop.from_file(args.input, config_yaml=args.config, process=args.process)
        bd.configure(
            threshold=args.threshold,
            strip_height=args.strip_height,
            timeout=args.timeout,
            executor=args.executor,
            show_progress=not args.quiet,
        )
        description = bd.config.get_description()
        if description:
            print(f"Process '{bd.config.curr_process}': {description}")
        bd.remove_background()
        bd.pipeline.metrics.print_summary()
        output_path = bd.save(args.output)
        print(f"Results saved to: {output_path}")

    except (BackdropError, ValueError, OSError) as e:
        print(f"Processing failed: {e}")
        sys.exit(1)

def run_edges(input_path, output_path, threshold, chunk_size):
    """Write the edge mask of an image file."""
    try:
        from . import raster_ops as ro
        from .processing import check_threshold

        pixels = ro.open_image(input_path)
        check_threshold(threshold)
        mask = ro.dask_edge_mask(pixels, threshold, chunk_size=chunk_size)
        ro.save_mask(mask, output_path)
        print(f"Edge mask with {int(mask.sum())} edge pixels saved to: {output_path}")

    except (BackdropError, ValueError, OSError) as e:
        print(f"Edge detection failed: {e}")
        sys.exit(1)

def show_version():
    """Show version information."""
    from . import __version__, __author__
    print(f"Backdrop version {__version__}")
    print(f"Author: {__author__}")

def create_config_file(config_path, template="config.yaml"):
    """Create a new configuration file."""
    try:
        from .config import Config
        Config.create_user_config(config_path, template)
        print(f"✓ Configuration file created successfully at: {config_path}")
        print(f"You can now use: python -m backdrop process IMAGE --config {config_path}")
    except (ValueError, OSError) as e:
        print(f"✗ Error creating configuration file: {e}")
        sys.exit(1)

def list_config_templates():
    """List available configuration templates."""
    from .config import Config
    templates = Config.list_available_templates()
    print("Available configuration templates:")
    for template in templates:
        print(f"  - {template}")
    print(f"\nUse: python -m backdrop config create <path> --template <template_name>")

def manage_config(action, path=None, template=None):
    """Manage configuration files."""
    if action == "create":
        if not path:
            print("✗ Error: path is required for config create")
            sys.exit(1)
        create_config_file(path, template or "config.yaml")
    elif action == "templates":
        list_config_templates()
    else:
        print("✗ Error: Unknown config action")
        sys.exit(1)


if __name__ == "__main__":
    main()
