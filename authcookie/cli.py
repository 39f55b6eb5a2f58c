"""CLI for auth cookie encryption."""
import json
import secrets

import click

from authcookie.dependencies import build_orchestrator, check_availability
from authcookie.domain.codec import b64u_encode
from authcookie.domain.cookie import parse_auth_cookie
from authcookie.domain.keys import KEY_LENGTH
from authcookie.settings import FailurePolicy, Settings


def _strict_orchestrator():
    # Failures surface as None so the CLI can report them
    return build_orchestrator(Settings(AUTH_COOKIE_ON_FAILURE=FailurePolicy.REJECT))


@click.group()
def cli():
    """Auth cookie username encryption CLI."""
    pass


@cli.command()
@click.argument("username")
def encrypt(username: str):
    """Encrypt a username into a cookie field."""
    orchestrator = _strict_orchestrator()
    if not orchestrator.encryption_enabled:
        click.echo("Error: encryption is not available (see `status`)", err=True)
        raise SystemExit(1)

    fields = orchestrator.encrypt_field([username])
    if fields is None:
        click.echo("Error: failed to encrypt username", err=True)
        raise SystemExit(1)
    click.echo(fields[0])


@cli.command()
@click.argument("field")
def decrypt(field: str):
    """Decrypt an encrypted username field."""
    orchestrator = _strict_orchestrator()
    if not field.startswith(orchestrator.marker):
        click.echo(f"Error: field does not start with marker {orchestrator.marker!r}", err=True)
        raise SystemExit(1)
    if not orchestrator.encryption_enabled:
        click.echo("Error: encryption is not available (see `status`)", err=True)
        raise SystemExit(1)

    username = orchestrator.decrypt_username(field)
    if username is None:
        click.echo("Error: field cannot be decrypted", err=True)
        raise SystemExit(1)
    click.echo(username)


@cli.command()
@click.argument("cookie")
@click.option("--scheme", default="", help="Auth scheme (auth, secure_auth, logged_in)")
def parse(cookie: str, scheme: str):
    """Parse an auth cookie and resolve its username."""
    parsed = parse_auth_cookie(cookie, _strict_orchestrator(), scheme=scheme)
    if parsed is None:
        click.echo("Error: cookie cannot be parsed", err=True)
        raise SystemExit(1)
    click.echo(json.dumps(parsed.to_dict(), indent=2))


@cli.command()
def status():
    """Report whether cookie encryption can run."""
    problems = check_availability(Settings())
    if not problems:
        click.echo("✓ ready")
        return
    for problem in problems:
        click.echo(f"✗ {problem}")
    raise SystemExit(1)


@cli.command("generate-key")
def generate_key():
    """Print a random secret suitable for AUTH_COOKIE_KEY."""
    click.echo(b64u_encode(secrets.token_bytes(KEY_LENGTH)))


if __name__ == "__main__":
    cli()
