"""Main entry point for the application."""

from __future__ import annotations

import argparse
import logging
import sys

from . import config
from .app import AppConfig
from .errors import StartupError
from .surfaces import default_surface_configs

logger = logging.getLogger("multiscene")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="multiscene",
        description="Animated 2D shapes drawn across several shared-context windows.",
    )
    parser.add_argument(
        "--secondary-count",
        type=int,
        default=len(config.SECONDARY_SURFACES),
        choices=range(len(config.SECONDARY_SURFACES) + 1),
        help="Number of secondary windows to open next to the primary.",
    )
    parser.add_argument(
        "--width", type=int, default=config.WINDOW_WIDTH, help="Window width in pixels."
    )
    parser.add_argument(
        "--height",
        type=int,
        default=config.WINDOW_HEIGHT,
        help="Window height in pixels.",
    )
    parser.add_argument(
        "--shader-errors",
        choices=("fatal", "log"),
        default=config.SHADER_ERROR_POLICY,
        help="Abort on shader compile/link failure, or log it and keep running.",
    )
    parser.add_argument(
        "--no-vsync",
        action="store_true",
        help="Present frames without waiting for vertical sync.",
    )
    parser.add_argument(
        "--log-level",
        default=logging.getLevelName(config.LOG_LEVEL),
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging verbosity.",
    )
    return parser.parse_args(argv)


def build_app_config(args: argparse.Namespace) -> AppConfig:
    return AppConfig(
        surfaces=default_surface_configs(
            args.secondary_count, width=args.width, height=args.height
        ),
        vsync=not args.no_vsync,
        shader_error_policy=args.shader_errors,
    )


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level, format=config.LOG_FORMAT)
    app_config = build_app_config(args)

    # Imported here so --help and argument errors never load the GLFW library.
    from multiscene.backends.glfw.app import GlfwApp

    try:
        app = GlfwApp(app_config)
    except StartupError as e:
        # ShaderManager has already logged any compiler or linker output.
        logger.critical(f"Startup failed: {e}")
        return 1

    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
