"""
agui-adapter CLI.

Commands (registered from cli.main):
- translate: run captured agent output through the pipeline
- mock:      replay the canned lifecycle
"""

import typer

from agui_adapter.cli.main import configure_logging, register_commands

app = typer.Typer(help="AG-UI adapter - turn CLI agent output into lifecycle events")


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose logging (DEBUG level)"
    ),
):
    """
    AG-UI adapter - turn CLI agent output into lifecycle events.
    """
    configure_logging(verbose)


register_commands(app)

if __name__ == "__main__":
    app()
