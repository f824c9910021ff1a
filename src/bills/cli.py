#!/usr/bin/env python3
"""
Main CLI entry point for the Bills API server.
"""

import asyncio
import json
import logging
import os
import sys

import click
import uvicorn

from bills import __version__
from bills.logging import configure_logging, get_logger

logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="bills")
def cli() -> None:
    """Bills CLI - serve the API and run GraphQL operations."""
    pass


@cli.command()
@click.option("--host", default="0.0.0.0", help="Host to bind to (default: 0.0.0.0)")
@click.option("--port", default=4000, type=int, help="Port to bind to (default: 4000)")
@click.option("--reload", is_flag=True, default=False, help="Enable auto-reload for development")
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
def serve(host: str, port: int, reload: bool, log_level: str) -> None:
    """Start the Bills API server."""
    configure_logging(debug=(log_level == "debug"))

    logger.info("Starting Bills API server", host=host, port=port, reload=reload)

    # Make settings visible to the app module when it is imported by uvicorn
    if log_level == "debug":
        os.environ["BILLS_DEBUG"] = "true"
        os.environ["BILLS_LOG_LEVEL"] = "debug"
    else:
        os.environ.setdefault("BILLS_DEBUG", "false")
        os.environ.setdefault("BILLS_LOG_LEVEL", log_level)

    try:
        # Each process owns its own in-memory store, so only a single worker is served
        uvicorn.run(
            "bills.api.app:app",
            host=host,
            port=port,
            reload=reload,
            log_level=log_level,
            access_log=True,
        )
    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user")
    except Exception as e:
        logger.error("Server startup failed", error=str(e))
        sys.exit(1)


@cli.command()
def schema() -> None:
    """Print the GraphQL schema in SDL."""
    from bills.graphql.schema import print_schema

    click.echo(print_schema())


@cli.command()
@click.argument("document")
@click.option("--variables", default=None, help="JSON object of variable values")
@click.option("--operation-name", default=None, help="Operation to run in a multi-operation document")
@click.option(
    "--no-seed",
    is_flag=True,
    default=False,
    help="Start from an empty store instead of the demo users",
)
def query(document: str, variables: str | None, operation_name: str | None, no_seed: bool) -> None:
    """Execute a GraphQL DOCUMENT against a fresh in-memory store and print the response."""
    from bills.graphql.executor import RequestExecutor
    from bills.store import create_store

    # Keep stdout clean for the JSON response
    configure_logging(level=logging.WARNING)

    try:
        variable_values = json.loads(variables) if variables else None
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"invalid JSON: {e}", param_hint="--variables") from e

    payload = {"query": document, "variables": variable_values, "operationName": operation_name}
    executor = RequestExecutor(create_store(seed=not no_seed))

    response = asyncio.run(executor.execute(payload))
    click.echo(json.dumps(response.to_dict(), indent=2))

    if not response.ok:
        sys.exit(1)


if __name__ == "__main__":
    cli()
