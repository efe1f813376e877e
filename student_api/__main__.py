"""CLI for the student records API.

Usage:
    python -m student_api serve                      # Config from CONFIG_PATH or .env
    python -m student_api serve --config local.env   # Explicit config file
    python -m student_api show-config --config local.env
"""

from typing import Optional

import typer

from student_api.core.config import log_config, must_load_settings
from student_api.core.logging import setup_logging
from student_api.main import run

app = typer.Typer(
    name="student_api",
    help="Student records REST API",
    no_args_is_help=True,
)


@app.command("serve")
def cmd_serve(
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to configuration file"),
) -> None:
    """Open storage and serve HTTP until SIGINT/SIGTERM."""
    run(config)


@app.command("show-config")
def cmd_show_config(
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to configuration file"),
) -> None:
    """Log the effective configuration (password masked) and exit."""
    setup_logging()
    log_config(must_load_settings(config))


if __name__ == "__main__":
    app()
