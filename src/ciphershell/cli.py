"""Command line interface for CipherShell."""

from __future__ import annotations

import logging
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Callable

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ciphershell import __version__
from ciphershell.container import HEADER_LEN, inspect_file, normalize_mode, process_file
from ciphershell.errors import (
    CryptoError,
    FormatError,
    PassphraseAttemptsExhausted,
    PassphraseError,
    StreamError,
    UsageError,
)
from ciphershell.passphrase import (
    ConsolePassphraseReader,
    PassphraseReader,
    ScriptedPassphraseReader,
    request_passphrase,
)

EXIT_SUCCESS = 0
EXIT_USAGE = 1
EXIT_CRYPTO = 2
EXIT_STREAM = 3

USAGE = "Usage: ciphershell <encrypt|decrypt|info> <filename>"
INFO_SELECTORS = ("info", "-i")

console = Console()


def _package_version() -> str:
    try:
        return version("ciphershell")
    except PackageNotFoundError:
        return __version__


def _configure_logging(verbose: bool) -> None:
    package_logger = logging.getLogger("ciphershell")
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(isinstance(handler, RichHandler) for handler in package_logger.handlers):
        package_logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False))


def _build_reader(source: str) -> PassphraseReader:
    if source == "stdin":
        return ScriptedPassphraseReader(click.get_text_stream("stdin"))
    return ConsolePassphraseReader()


def _handle_action(action: Callable[[], None], *, path: Path) -> int:
    try:
        action()
    except PassphraseAttemptsExhausted:
        return EXIT_USAGE
    except (UsageError, PassphraseError) as exc:
        console.print(f"[red]{exc}[/red]")
        return EXIT_USAGE
    except FormatError:
        console.print(f"[red]{path} was not encrypted using this application.[/red]")
        return EXIT_USAGE
    except CryptoError as exc:
        console.print(f"[red]Cryptographic error:[/red] {exc}")
        return EXIT_CRYPTO
    except StreamError:
        console.print("[red]File processing error: Bad passphrase or corrupted file.[/red]")
        return EXIT_STREAM
    except Exception as exc:  # noqa: BLE001
        console.print(f"[red]An unexpected error occurred:[/red] {exc}")
        return EXIT_USAGE
    return EXIT_SUCCESS


def _show_header(path: Path) -> None:
    header = inspect_file(path)
    table = Table(show_header=False, box=None)
    table.add_row("Magic", header.magic.decode("ascii"))
    table.add_row("File extension", header.extension_name or "(none)")
    table.add_row("Salt", header.salt.hex())
    table.add_row("IV", header.iv.hex())
    table.add_row("Header length", f"{HEADER_LEN} bytes")

    console.print("[bold]CipherShell header[/bold]")
    console.print(table)


@click.command(
    context_settings={"help_option_names": ["-h", "--help"], "ignore_unknown_options": True},
    help="Encrypt or decrypt a single file with a passphrase.",
    epilog=(
        "Examples:\n  ciphershell encrypt report.txt   # writes report.enc\n"
        "  ciphershell -d report.enc        # restores report.txt\n"
        "  ciphershell info report.enc      # shows the header"
    ),
)
@click.argument("arguments", nargs=-1, metavar="<encrypt|decrypt|info> <filename>")
@click.option(
    "--passphrase-source",
    type=click.Choice(["tty", "stdin"], case_sensitive=False),
    default="tty",
    show_default=True,
    envvar="CIPHERSHELL_PASSPHRASE_SOURCE",
    help="Read the passphrase from the terminal without echo, or line by line from stdin.",
)
@click.option(
    "--verbose/--quiet",
    "verbose",
    default=False,
    envvar="CIPHERSHELL_VERBOSE",
    help="Log each processing step.",
)
@click.version_option(version=_package_version(), prog_name="CipherShell")
@click.pass_context
def cli(ctx: click.Context, arguments: tuple[str, ...], passphrase_source: str, verbose: bool) -> None:
    _configure_logging(verbose)

    if len(arguments) != 2:
        console.print(USAGE)
        ctx.exit(EXIT_USAGE)
        return

    selector, raw_path = arguments
    path = Path(raw_path)
    if not path.exists():
        console.print(f"File '{path}' does not exist.")
        ctx.exit(EXIT_USAGE)
        return
    if not path.is_file():
        console.print(f"File '{path}' is not a regular file.")
        ctx.exit(EXIT_USAGE)
        return

    if selector.lower() in INFO_SELECTORS:
        ctx.exit(_handle_action(lambda: _show_header(path), path=path))
        return

    try:
        mode = normalize_mode(selector)
    except UsageError as exc:
        console.print(f"[red]{exc}[/red]")
        ctx.exit(EXIT_USAGE)
        return

    reader = _build_reader(passphrase_source.lower())
    written: list[Path] = []
    code = _handle_action(
        lambda: written.append(process_file(mode, path, request_passphrase(reader, mode, console=console))),
        path=path,
    )
    if code == EXIT_SUCCESS:
        verb = "encrypted" if mode == "encrypt" else "decrypted"
        console.print(f"[green]File successfully {verb}![/green] Wrote {written[0]}.")
    ctx.exit(code)


def main(argv: list[str] | None = None) -> int:
    try:
        return cli.main(args=argv, prog_name="ciphershell", standalone_mode=False)
    except click.ClickException as exc:
        exc.show()
        return EXIT_USAGE
    except click.Abort:
        console.print("Aborted.")
        return EXIT_USAGE
    except SystemExit as exc:  # noqa: TRY003
        return exc.code if isinstance(exc.code, int) else EXIT_USAGE


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
