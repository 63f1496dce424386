"""Root CLI app - entry point and command registration."""

from pathlib import Path

import typer

from lmsrmarket.config import get_settings
from lmsrmarket.config.settings import configure_logging

app = typer.Typer(
    name="lmsr",
    help="LMSR market maker - create, trade, resolve and pay out prediction markets.",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    config_dir: Path | None = typer.Option(
        None, "--config-dir", "-C", help="Config directory (default: ./config or package config)"
    ),
    profile: str | None = typer.Option(
        None, "--profile", "-p", help="Config profile (e.g. dev) to overlay on default.toml"
    ),
    db_path: str | None = typer.Option(None, "--db", help="DuckDB path (overrides storage.db_path)"),
) -> None:
    """Configure logging and store options in context."""
    settings = get_settings(profile, config_dir)
    if db_path:
        settings.storage["db_path"] = db_path
    configure_logging(settings)
    ctx.obj = {"settings": settings, "config_dir": config_dir, "profile": profile}


# Subcommands registered from other modules
from lmsrmarket.cli import market, trades  # noqa: E402

app.add_typer(market.app, name="market")
app.add_typer(trades.app, name="trades")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
