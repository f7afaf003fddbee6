"""Process bootstrap: connect, serve, and close the connection on termination."""
import argparse
import asyncio
import logging
import os
import signal
import sys
from typing import List, Optional

import uvicorn

from mongo_mcp.config.settings import API_HOST, API_PORT, DATABASE_URL, LOG_FORMAT, LOG_LEVEL
from mongo_mcp.exceptions import ConfigurationError
from mongo_mcp.services.mcp.server import create_server, serve_stdio
from mongo_mcp.services.mongodb.client import MongoContext

logger = logging.getLogger(__name__)

def shutdown(ctx: MongoContext, reason: str) -> int:
    """Close the connection and return the process exit code."""
    logger.info(f"Received {reason}. Shutting down gracefully...")
    try:
        ctx.close()
    except Exception as e:
        logger.error(f"Error during shutdown: {str(e)}", exc_info=True)
        return 1
    return 0

def _install_signal_handlers(stop: asyncio.Event, received: List[str]) -> None:
    loop = asyncio.get_running_loop()

    def on_signal(sig: signal.Signals) -> None:
        received.append(sig.name)
        stop.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, on_signal, sig)
        except NotImplementedError:
            # Windows event loops have no add_signal_handler
            signal.signal(sig, lambda signum, frame: loop.call_soon_threadsafe(on_signal, signal.Signals(signum)))

def _exit_now(code: int) -> None:
    """Flush logs and stdout, then end the process without waiting on other threads."""
    logging.shutdown()
    sys.stdout.flush()
    os._exit(code)

async def run_stdio(connection_string: str) -> int:
    """
    Serve MCP over stdio until a termination signal or the client disconnects.

    On SIGINT/SIGTERM the connection is closed and the process exits at once
    with the shutdown code, even while the client still holds stdin open.

    Returns:
        0 after a clean shutdown, 1 if the server or the shutdown failed
    """
    ctx = MongoContext(connection_string)
    await ctx.connect()
    server = create_server(ctx)

    stop = asyncio.Event()
    received: List[str] = []
    _install_signal_handlers(stop, received)
    logger.info("MongoDB MCP server running.")

    serve_task = asyncio.ensure_future(serve_stdio(server))
    stop_task = asyncio.ensure_future(stop.wait())
    done, _ = await asyncio.wait({serve_task, stop_task}, return_when=asyncio.FIRST_COMPLETED)

    if stop_task in done:
        # The stdin reader thread cannot be cancelled, so close and leave without joining it
        _exit_now(shutdown(ctx, received[0]))

    stop_task.cancel()
    await asyncio.gather(stop_task, return_exceptions=True)

    if not serve_task.cancelled() and serve_task.exception() is not None:
        logger.error(f"MCP server stopped with an error: {serve_task.exception()}")
        shutdown(ctx, "server error")
        return 1

    return shutdown(ctx, received[0] if received else "end of input")

def run_http(connection_string: str) -> int:
    """Serve the HTTP transport with uvicorn; the app connects and closes the context itself."""
    from mongo_mcp.api.app import create_app

    app = create_app(MongoContext(connection_string))
    uvicorn.run(app, host=API_HOST, port=API_PORT)
    return 0

def run(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="MongoDB MCP server")
    parser.add_argument("--transport", choices=["stdio", "http"], default="stdio", help="Transport to serve (default: stdio)")
    parser.add_argument("--database-url", default=DATABASE_URL, help="MongoDB connection string including the database name")
    args = parser.parse_args(argv)

    # stdout carries the MCP stream, so logs go to stderr
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT, stream=sys.stderr)

    try:
        if args.transport == "http":
            exit_code = run_http(args.database_url)
        else:
            exit_code = asyncio.run(run_stdio(args.database_url))
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e.message}")
        exit_code = 1
    except Exception as e:
        logger.error(f"Server failed to start or encountered a fatal error: {str(e)}", exc_info=True)
        exit_code = 1

    sys.exit(exit_code)

if __name__ == "__main__":
    run()
