"""Factory for constructing the CLI argument parser."""

import argparse
from pathlib import Path

from . import __version__


def build_arg_parser() -> argparse.ArgumentParser:
    """Construct the argparse parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="pueue-tui",
        description="Terminal dashboard for the jobs of a pueue daemon",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Path to the pueue configuration file (default: $PUEUE_CONFIG_PATH or ~/.config/pueue/pueue.yml)",
    )

    parser.add_argument(
        "-p",
        "--profile",
        type=str,
        default=None,
        help="Configuration profile to use",
    )

    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser
