"""CLI commands for Tubeline."""

import base64
import re
import secrets
import sys
from pathlib import Path

import click


@click.group()
@click.version_option(package_name="tubeline")
def cli():
    """Tubeline - users, tweets, subscriptions and videos over a JSON API."""
    pass


@cli.command()
@click.option("--host", default="127.0.0.1", help="Host to bind to")
@click.option("--port", default=8000, type=int, help="Port to bind to")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
@click.option("--workers", default=1, type=int, help="Number of worker processes")
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Logging level",
)
def serve(host, port, reload, workers, log_level):
    """Run the API server."""
    import asyncio
    import signal

    from hypercorn.asyncio import serve as hypercorn_serve
    from hypercorn.config import Config

    config = Config()
    config.application_path = "tubeline.asgi:app"
    config.bind = [f"{host}:{port}"]
    config.workers = 1 if reload else workers
    config.loglevel = log_level.upper()
    config.include_server_header = False

    if reload:
        config.use_reloader = True
        from hypercorn.run import run
        run(config)
        return

    from tubeline.asgi import app

    shutdown_event = asyncio.Event()

    loop = asyncio.new_event_loop()
    loop.add_signal_handler(signal.SIGINT, shutdown_event.set)
    loop.add_signal_handler(signal.SIGTERM, shutdown_event.set)
    try:
        loop.run_until_complete(
            hypercorn_serve(app, config, shutdown_trigger=shutdown_event.wait)
        )
    finally:
        loop.close()


def generate_secret(fmt: str, length: int) -> str:
    if fmt == "urlsafe":
        return secrets.token_urlsafe(length)
    if fmt == "hex":
        return secrets.token_hex(length)
    return base64.b64encode(secrets.token_bytes(length)).decode("ascii")


def write_env_secret(env_path: Path, key: str) -> None:
    """Set SECRET_KEY in ``env_path``, replacing an existing value."""
    env_content = env_path.read_text() if env_path.exists() else ""

    secret_key_pattern = re.compile(r"^SECRET_KEY=.*$", re.MULTILINE)
    new_line = f"SECRET_KEY={key}"

    if secret_key_pattern.search(env_content):
        env_content = secret_key_pattern.sub(new_line, env_content)
    else:
        if env_content and not env_content.endswith("\n"):
            env_content += "\n"
        env_content += new_line + "\n"

    env_path.write_text(env_content)


@cli.command()
@click.option(
    "--write",
    type=click.Path(),
    default=None,
    help="Write SECRET_KEY to a .env file",
)
@click.option(
    "--format",
    "fmt",
    default="urlsafe",
    type=click.Choice(["urlsafe", "hex", "base64"]),
    help="Output format for the secret key",
)
@click.option("--length", default=32, type=int, help="Number of random bytes")
def secret(write, fmt, length):
    """Generate a secret key for signing tokens."""
    key = generate_secret(fmt, length)

    if write:
        env_path = Path(write)
        write_env_secret(env_path, key)
        click.echo(f"SECRET_KEY written to {env_path}")
    else:
        click.echo(key)


def _run_alembic(args: list[str]) -> None:
    """Build an Alembic Config from the packaged alembic.ini and run the given command."""
    from alembic.config import CommandLine, Config

    alembic_ini = Path(__file__).parent / "alembic.ini"
    if not alembic_ini.exists():
        click.echo("Error: Could not find alembic.ini", err=True)
        sys.exit(1)

    cfg = Config(str(alembic_ini))

    cmd = CommandLine()
    options = cmd.parser.parse_args(args)
    if not hasattr(options, "cmd"):
        cmd.parser.error("too few arguments")
    else:
        cfg.cmd_opts = options
        fn, positional, kwarg = options.cmd
        fn(
            cfg,
            *[getattr(options, k, None) for k in positional],
            **{k: getattr(options, k, None) for k in kwarg},
        )


@cli.command(
    context_settings=dict(
        ignore_unknown_options=True,
        allow_extra_args=True,
    )
)
@click.pass_context
def db(ctx):
    """Run database migrations via Alembic.

    \b
    Examples:
        tubeline db upgrade head     # Apply all migrations
        tubeline db downgrade -1     # Rollback one migration
        tubeline db current          # Show current revision
        tubeline db revision -m "description" --autogenerate
    """
    if not ctx.args:
        click.echo(ctx.get_help())
        return

    _run_alembic(ctx.args)


if __name__ == "__main__":
    cli()
