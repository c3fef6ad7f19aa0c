"""remotever - resolve generated SDK versions to their module and plugin

    Returns:
        int: Exit code
"""
import logging
import sys

from constants import ExitCodes
from common.errors import RemoteError, RemoteverError, UsageError
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from args import build_parser
from cli_config import load_remote_config
from cli_sdk import SDK_COMMANDS

logger = logging.getLogger(__name__)


def exit_code_for(exc: RemoteverError) -> int:
    """Map a failure onto the process exit code."""
    if isinstance(exc, UsageError):
        return ExitCodes.USAGE_ERROR.value
    if isinstance(exc, RemoteError):
        return ExitCodes.CONNECTION_ERROR.value
    return ExitCodes.RESOLUTION_ERROR.value


def run(argv=None, *, client_factory=None, stdout=None, stderr=None) -> int:
    """Run the CLI and return the exit code instead of exiting.

    Args:
        argv: Argument list (defaults to ``sys.argv[1:]``).
        client_factory: Callable building the registry client from a
            RemoteConfig; defaults to ``registry.bsr.BSRClient``.
        stdout: Stream for results.
        stderr: Stream for the one-line error message.
    """
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(getattr(args, "LOG_LEVEL", None), getattr(args, "LOG_FILE", None))

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action="main",
                                target=getattr(args, "SDK_COMMAND", None))
        )

    handler = SDK_COMMANDS.get(getattr(args, "SDK_COMMAND", None) or "")
    if getattr(args, "COMMAND", None) != "sdk" or handler is None:
        parser.print_usage(stderr)
        stderr.write("error: must specify a subcommand, see 'remotever sdk --help'\n")
        return ExitCodes.USAGE_ERROR.value

    try:
        config = load_remote_config(getattr(args, "REMOTE", None), getattr(args, "CONFIG", None))
        if client_factory is None:
            # Lazy import keeps --help free of the HTTP stack
            from registry.bsr import BSRClient  # pylint: disable=import-outside-toplevel
            client_factory = BSRClient
        from versioning.service import SDKResolutionService  # pylint: disable=import-outside-toplevel
        service = SDKResolutionService(client_factory(config), config)
        output = handler(args, service)
    except RemoteverError as exc:
        logger.debug("Command failed", exc_info=True)
        stderr.write(f"error: {exc}\n")
        return exit_code_for(exc)

    stdout.write(output)
    if not output.endswith("\n"):
        stdout.write("\n")
    return ExitCodes.SUCCESS.value


def main():
    """Main function of the program."""
    sys.exit(run())


if __name__ == "__main__":
    main()
