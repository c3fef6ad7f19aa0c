"""Argument parsing functionality for remotever."""

import argparse
from constants import Constants


def build_parser():
    """Build the argument parser with the ``sdk`` command group."""
    parser = argparse.ArgumentParser(
        prog="remotever",
        description=(
            "remotever - resolve generated SDK package versions back to "
            "their module and plugin"
        ),
        add_help=True,
    )

    parser.add_argument("--remote",
                        dest="REMOTE",
                        help=f"The remote to use (default: {Constants.DEFAULT_REMOTE})",
                        action="store",
                        type=str)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'])
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)

    commands = parser.add_subparsers(dest="COMMAND", metavar="command")
    sdk = commands.add_parser(
        "sdk",
        help="Commands for doing extra stuff with the Generated SDKs",
    )
    sdk_commands = sdk.add_subparsers(dest="SDK_COMMAND", metavar="command")

    resolve = sdk_commands.add_parser(
        "resolve",
        help="Resolve an arbitrary version to a well-known module and plugin",
        description="Resolve a generated SDK package name and version, "
                    "e.g. '@buf/acme_petapis.bufbuild_es v1.0.0-20240101120000-a1b2c3d4e5f6.1'",
    )
    resolve.add_argument("ARGS",
                         nargs="*",
                         metavar="package version",
                         help="Downstream package name and its version")
    resolve.add_argument("-f", "--format",
                         dest="OUTPUT_FORMAT",
                         help="Output format (default: text)",
                         action="store",
                         type=str.lower,
                         choices=['text', 'json'],
                         default='text')

    version = sdk_commands.add_parser(
        "version",
        help="Compute the synthetic SDK version for a plugin and module",
        description="Compute the synthetic SDK version, e.g. "
                    "'bufbuild/es:v1.4.2 acme/petapis:main' (omit the version or use 'latest')",
    )
    version.add_argument("ARGS",
                         nargs="*",
                         metavar="ref",
                         help="[remote/]owner/plugin[:version|latest] [remote/]owner/module[:ref|latest]")
    version.add_argument("-f", "--format",
                         dest="OUTPUT_FORMAT",
                         help="Output format (default: json)",
                         action="store",
                         type=str.lower,
                         choices=['text', 'json'],
                         default='json')

    return parser
