"""
Top-level CLI commands: translate, mock.
"""

import asyncio
import codecs
import uuid
from typing import Callable, Optional

import typer
from pydantic import ValidationError

from agui_adapter.config import AdapterConfig
from agui_adapter.logger import get_logger, setup_logging
from agui_adapter.mock.generator import MockLifecycleGenerator
from agui_adapter.pipeline import TranslationPipeline
from agui_adapter.protocol.events import AgentEvent

logger = get_logger(__name__)


def configure_logging(verbose: bool = False):
    """Configure logging for the CLI; AGUI_LOG_LEVEL applies unless --verbose is given."""
    log_level = "DEBUG" if verbose else load_config().log_level
    setup_logging(level=log_level)


def load_config(**overrides) -> AdapterConfig:
    """Read AGUI_* settings, exiting with a readable message if they are invalid."""
    try:
        return AdapterConfig.from_env(**overrides)
    except ValidationError as e:
        typer.secho(f"❌ Invalid configuration: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


def print_event(event: AgentEvent):
    typer.echo(event.to_json())


def chunk_reader(source, chunk_size: int) -> Callable[[], Optional[str]]:
    """
    Return a callable that reads the next chunk of ``source`` (None at EOF).

    When the text stream sits on a buffered binary stream, chunks come from
    ``read1``, which returns whatever bytes are already available instead of
    waiting for ``chunk_size`` of them. An agent's unterminated prompt then
    reaches the segmenter while the agent waits for an answer.
    """
    raw = getattr(source, "buffer", None)
    if raw is None or not hasattr(raw, "read1"):

        def read_text():
            return source.read(chunk_size) or None

        return read_text

    decoder = codecs.getincrementaldecoder(getattr(source, "encoding", None) or "utf-8")(
        errors=getattr(source, "errors", None) or "strict"
    )

    def read_bytes():
        data = raw.read1(chunk_size)
        if not data:
            return decoder.decode(b"", final=True) or None
        # May be "" when a multi-byte character is split across reads.
        return decoder.decode(data)

    return read_bytes


async def run_translate(
    source,
    config: AdapterConfig,
    session_id: str,
    exit_code: Optional[int],
    chunk_size: int,
):
    pipeline = TranslationPipeline(config)
    pipeline.add_sink(print_event)

    read_chunk = chunk_reader(source, chunk_size)

    try:
        while True:
            # Reads block in a worker thread so idle-flush timers keep firing.
            chunk = await asyncio.to_thread(read_chunk)
            if chunk is None:
                break
            if chunk:
                pipeline.feed(session_id, chunk)

        if exit_code is None:
            pipeline.segmenter.remove(session_id)
        else:
            pipeline.handle_exit(session_id, exit_code)
    finally:
        pipeline.dispose()


def register_commands(app: typer.Typer):
    """Register top-level commands on the main app."""

    @app.command()
    def translate(
        source: typer.FileText = typer.Argument(
            "-", help="File with captured agent output ('-' for stdin)"
        ),
        session_id: Optional[str] = typer.Option(
            None, "--session-id", "-s", help="Session id to stamp on events"
        ),
        agent: Optional[str] = typer.Option(
            None, "--agent", "-a", help="Agent dialect: auto, claude or openclaw"
        ),
        flush_timeout_ms: Optional[int] = typer.Option(
            None, "--flush-timeout-ms", help="Idle time before a partial line is flushed"
        ),
        exit_code: Optional[int] = typer.Option(
            None, "--exit-code", help="Emit RUN_FINISHED with this process exit code"
        ),
        chunk_size: int = typer.Option(
            4096, "--chunk-size", min=1, help="Maximum size of each read"
        ),
    ):
        """Translate captured agent output into AG-UI events (JSON lines)."""
        config = load_config(agent_type=agent, flush_timeout_ms=flush_timeout_ms)
        sid = session_id or str(uuid.uuid4())
        logger.debug(f"Translating {source.name} as session {sid}")
        asyncio.run(run_translate(source, config, sid, exit_code, chunk_size))

    @app.command()
    def mock(
        agent: str = typer.Option("claude", "--agent", "-a", help="Agent name to report"),
        session_id: Optional[str] = typer.Option(
            None, "--session-id", "-s", help="Session id to stamp on events"
        ),
        base_delay_ms: Optional[int] = typer.Option(
            None, "--base-delay-ms", help="Base pause between events"
        ),
    ):
        """Replay a canned agent lifecycle as AG-UI events (JSON lines)."""
        config = load_config(mock_base_delay_ms=base_delay_ms)
        generator = MockLifecycleGenerator(agent_name=agent, session_id=session_id)
        logger.debug(f"Starting mock lifecycle for session {generator.session_id}")
        asyncio.run(
            generator.replay(
                print_event,
                base_delay=config.mock_base_delay_ms / 1000,
                initial_delay=0,
            )
        )
