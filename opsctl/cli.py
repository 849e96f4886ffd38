import logging
import sys

import typer

from opsctl.commands import cluster
from opsctl.config import Config
from opsctl.logging import setup_logging

app = typer.Typer(help="Submit maintenance operations to database clusters.")

debug_mode = False

app.add_typer(cluster.app, name="cluster")

# Global options callback
@app.callback()
def main(
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging"),
):
    """opsctl - cluster operations CLI."""
    global debug_mode
    debug_mode = debug
    setup_logging(debug)
    try:
        Config.validate()
    except ValueError as e:
        typer.secho(f"❌ {e}", err=True, fg="red")
        raise typer.Exit(code=1)
    if debug:
        logging.getLogger().setLevel(logging.DEBUG)
        logging.debug("Debug mode enabled")

if __name__ == "__main__":
    try:
        app()
    except Exception as e:
        if debug_mode:
            logging.exception(f"Unhandled exception: {e}")
        else:
            logging.error(f"Error: {e}")
        sys.exit(1)
