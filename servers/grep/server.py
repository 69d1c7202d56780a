"""Grep MCP server."""

import asyncio
import base64
import json
import logging
import os
import signal
import uuid
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from fastmcp import FastMCP
from fastmcp.server.dependencies import get_http_request
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from pydantic import ValidationError

from servers.grep.config import GrepServerConfig
from servers.grep.tool import ActiveSearches, GrepTool

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

load_dotenv()


class TelemetryManager:
    """Telemetry manager for Langfuse integration."""

    def __init__(self, config: GrepServerConfig) -> None:
        """Initialize telemetry manager."""
        self.config = config
        self._setup_telemetry()

    def _setup_telemetry(self) -> None:
        """Setup telemetry."""
        if not self.config.langfuse_enabled:
            return

        langfuse_auth = base64.b64encode(
            f"{self.config.langfuse_public_key}:{self.config.langfuse_secret_key}".encode()
        ).decode()

        os.environ["OTEL_EXPORTER_OTLP_HEADERS"] = f"Authorization=Basic {langfuse_auth}"
        os.environ["OTEL_EXPORTER_OTLP_ENDPOINT"] = (
            f"{self.config.langfuse_host}/api/public/otel"
        )

        trace_provider = TracerProvider()
        trace_provider.add_span_processor(SimpleSpanProcessor(OTLPSpanExporter()))
        trace.set_tracer_provider(trace_provider)

    @staticmethod
    def get_tracer(name: str) -> trace.Tracer:
        """Get tracer instance."""
        return trace.get_tracer(name)


config = GrepServerConfig()
if config.debug_mode:
    logging.getLogger().setLevel(logging.DEBUG)

telemetry = TelemetryManager(config)
tracer = telemetry.get_tracer("grep-mcp")

grep_tool = GrepTool.from_config(config)
logger.info(
    f"Using {config.search_backend} backend over {len(config.workspace_roots)} workspace root(s)"
)

server = FastMCP(sse_path="/grep/sse", message_path="/grep/messages/")

_shutdown_requested = False
_active_searches = ActiveSearches()


def signal_handler(sig: int, frame: Any) -> None:
    """Handle termination signals: refuse new searches and cancel running ones."""
    global _shutdown_requested
    logger.info(f"Received signal {sig}, initiating graceful shutdown...")
    _shutdown_requested = True
    _active_searches.cancel_all()


def _trace_id() -> str:
    """Trace id from the X-TRACE-ID header, or a fresh one outside HTTP requests."""
    try:
        request = get_http_request()
    except RuntimeError:
        return str(uuid.uuid4())
    return str(request.headers.get("X-TRACE-ID", uuid.uuid4()))


def _set_span_attributes(
    span: trace.Span,
    input_data: Dict[str, Any],
    output_data: Dict[str, Any],
    session_id: str,
) -> None:
    """Set span attributes for telemetry."""
    try:
        span.set_attribute("langfuse.session.id", session_id)
        span.set_attribute("langfuse.tags", ["grep-mcp"])
        span.set_attribute("input", json.dumps(input_data))
        span.set_attribute("output", json.dumps(output_data))
    except Exception as exc:
        logger.error(f"Error setting span attributes: {exc}")


@server.tool(name=GrepTool.name, description=grep_tool.description)
async def search_file_content(
    pattern: str, path: Optional[str] = None, include: Optional[str] = None
) -> str:
    """Search file contents for a pattern."""
    if _shutdown_requested:
        logger.info("Shutdown in progress, declining new requests")
        return "Server is shutting down"

    try:
        invocation = grep_tool.create_invocation(pattern, path=path, include=include)
    except ValidationError as exc:
        logger.warning(f"Invalid search arguments: {exc}")
        return f"Error: invalid search arguments: {exc}"

    with tracer.start_as_current_span("GrepMcp:search_file_content") as span:
        logger.info(f"Search {invocation.describe()}")
        with _active_searches.track() as cancel_event:
            result = await invocation.execute(cancel_event)

        input_data = {"pattern": pattern, "path": path, "include": include}
        output_data = {"status": result.status, "cancelled": result.cancelled}
        _set_span_attributes(span, input_data, output_data, _trace_id())

    logger.info(f"Search {invocation.describe()}: {result.status}")
    return result.report


async def _run_server() -> None:
    """Run the FastMCP server with both HTTP and SSE transports."""
    tasks = [
        server.run_http_async(
            transport="streamable-http",
            host="0.0.0.0",
            path="/grep/mcp",
            port=config.streamable_http_port,
        ),
        server.run_http_async(transport="sse", host="0.0.0.0", port=config.sse_port),
    ]
    try:
        await asyncio.gather(*tasks)
    finally:
        # uvicorn handles SIGINT/SIGTERM itself while serving
        cancelled = _active_searches.cancel_all()
        if cancelled:
            logger.info(f"Cancelled {cancelled} in-flight search(es) on shutdown")


def main() -> None:
    """Main entry point."""
    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        logger.info("Starting Grep MCP server...")
        asyncio.run(_run_server())
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt (CTRL+C)")
    except Exception as exc:
        logger.error(f"Server error: {exc}")
        raise
    finally:
        logger.info("Server has shut down.")


if __name__ == "__main__":
    main()
