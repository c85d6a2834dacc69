#!/usr/bin/env python3
import argparse
import asyncio
import logging
import sys

from vecshell_cli.command_handlers import dispatch
from vecshell_cli.command_parser import parse_line
from vecshell_cli.config import ShellConfig, load_config, LOG_LEVELS
from vecshell_exception_model.exception import UnrecognizedCommandException, \
    UnrecognizedEmbeddingFunctionException, RemoteServiceException, ConfigurationException
from vecshell_rest_client.vecshell_rest_api_client import VecshellRestAPIClient

logger = logging.getLogger(__name__)


def get_parser():
    parser = argparse.ArgumentParser(
        prog="vecshell",
        description="Vecshell: manage tenants, databases and collections of a vector store and read collections"
    )
    parser.add_argument(
        "--root",
        default=None,
        help="Base URL of the vector store (default http://localhost:8000)"
    )
    parser.add_argument(
        "--keep-going",
        action="store_true",
        default=None,
        help="Report remote errors and keep the session open instead of exiting"
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=LOG_LEVELS,
        type=str.upper,
        help="Logging level"
    )
    parser.add_argument(
        "command",
        nargs=argparse.REMAINDER,
        help="Run a single shell command, e.g. 'tenant get acme', and exit"
    )
    return parser


async def execute_line(client, line: str) -> bool:
    """
    Run one input line through the interpreter.

    Grammar and embedding-function errors are reported on stderr; remote
    errors propagate to the caller.

    Returns:
        False when the line asks to end the session, True otherwise.
    """
    try:
        command = parse_line(line)
    except UnrecognizedCommandException as e:
        logger.debug(f"No command pattern matched: {e}")
        print(e.message, file=sys.stderr)
        return True

    if command.name == "exit":
        return False

    try:
        await dispatch(client, command)
    except UnrecognizedEmbeddingFunctionException as e:
        logger.debug(f"Rejected embedding function: {e}")
        print(e.message, file=sys.stderr)
    return True


async def _execute_guarded(client, line: str, config: ShellConfig) -> bool:
    try:
        return await execute_line(client, line)
    except RemoteServiceException as e:
        if not config.keep_going:
            raise
        logger.error(f"Command failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return True


async def run_shell(client, config: ShellConfig) -> None:
    """Read, execute and print one line at a time until ``exit`` or end of input."""
    while True:
        try:
            line = input(config.prompt)
        except EOFError:
            break
        if not await _execute_guarded(client, line, config):
            break


async def _run_with_rest(config: ShellConfig, command=None):
    """Open REST client, run one command or the interactive loop, then close."""
    async with VecshellRestAPIClient(base_url=config.base_url) as client:
        if command:
            await _execute_guarded(client, " ".join(command), config)
        else:
            await run_shell(client, config)


def main(argv=None):
    args = get_parser().parse_args(argv)
    try:
        config = load_config(root=args.root, keep_going=args.keep_going, log_level=args.log_level)
    except ConfigurationException as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    logger.info(f"Connecting to {config.base_url}")
    try:
        asyncio.run(_run_with_rest(config, args.command))
    except RemoteServiceException as e:
        logger.error(f"Session aborted: {e}")
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def entry_point():
    main()


if __name__ == "__main__":
    main()
