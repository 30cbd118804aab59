"""Passphrase acquisition: validation, confirmation and erasure.

Passphrases travel as UTF-8 ``bytearray`` buffers so they can be overwritten
in place. Every buffer read here is either handed to the caller (who must
zero it after key derivation) or zeroed before control leaves this module.
"""
from __future__ import annotations

import getpass
import hmac
import logging
import sys
from typing import Iterable, Iterator, Protocol, runtime_checkable

from rich.console import Console

from ciphershell.container.core import ModeLiteral
from ciphershell.crypto.secure_memory import secure_zeroize
from ciphershell.errors import PassphraseAttemptsExhausted, PassphraseError, UsageError

MIN_PASSPHRASE_LENGTH = 16
MAX_ATTEMPTS = 3

PASSPHRASE_PROMPT = f"Enter passphrase (at least {MIN_PASSPHRASE_LENGTH} characters): "
CONFIRM_PROMPT = "Confirm passphrase: "

logger = logging.getLogger(__name__)


@runtime_checkable
class PassphraseReader(Protocol):
    def read_passphrase(self, prompt: str) -> bytearray: ...


class ConsolePassphraseReader:
    """Reads from the controlling terminal without echo."""

    def read_passphrase(self, prompt: str) -> bytearray:
        if not sys.stdin.isatty():
            raise UsageError("No console available. This application must be run from a console.")
        return bytearray(getpass.getpass(prompt).encode("utf-8"))


class ScriptedPassphraseReader:
    """Deterministic reader fed from an iterable of entries (tests, piped stdin)."""

    def __init__(self, entries: Iterable[str]) -> None:
        self._entries: Iterator[str] = iter(entries)

    def read_passphrase(self, prompt: str) -> bytearray:
        try:
            entry = next(self._entries)
        except StopIteration:
            raise PassphraseError("No more passphrase input available") from None
        return bytearray(entry.rstrip("\r\n").encode("utf-8"))


def passphrase_length(passphrase: bytes | bytearray) -> int:
    """Number of characters in a UTF-8 buffer (continuation bytes not counted)."""
    return sum(1 for byte in passphrase if byte & 0xC0 != 0x80)


def is_valid_passphrase(passphrase: bytes | bytearray | None) -> bool:
    return passphrase is not None and passphrase_length(passphrase) >= MIN_PASSPHRASE_LENGTH


def clear_passphrase(*passphrases: bytearray | None) -> None:
    secure_zeroize(*passphrases)


def request_passphrase(
    reader: PassphraseReader,
    mode: ModeLiteral,
    *,
    console: Console | None = None,
    max_attempts: int = MAX_ATTEMPTS,
) -> bytearray:
    """Ask for a passphrase until one is valid (and confirmed, when encrypting).

    Short entries and mismatched confirmations cost one attempt each. After
    ``max_attempts`` failures :class:`PassphraseAttemptsExhausted` is raised.
    """
    console = console or Console(stderr=True)

    for attempt in range(1, max_attempts + 1):
        passphrase = reader.read_passphrase(PASSPHRASE_PROMPT)
        try:
            if not is_valid_passphrase(passphrase):
                clear_passphrase(passphrase)
                logger.debug("Passphrase attempt %d/%d rejected: too short", attempt, max_attempts)
                console.print("Passphrase too short. Please try again.\n")
                continue

            if mode == "encrypt":
                confirmation = reader.read_passphrase(CONFIRM_PROMPT)
                try:
                    matched = hmac.compare_digest(passphrase, confirmation)
                finally:
                    clear_passphrase(confirmation)

                if not matched:
                    clear_passphrase(passphrase)
                    logger.debug("Passphrase attempt %d/%d rejected: mismatch", attempt, max_attempts)
                    console.print("Passphrases do not match! Please try again.\n")
                    continue

            return passphrase
        except BaseException:
            clear_passphrase(passphrase)
            raise

    console.print("Too many attempts. Exiting...")
    raise PassphraseAttemptsExhausted(f"No valid passphrase after {max_attempts} attempts")
