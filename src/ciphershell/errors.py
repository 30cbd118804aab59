"""Custom exceptions for CipherShell."""


class CipherShellError(Exception):
    """Base exception for CipherShell."""


class UsageError(CipherShellError):
    """Invocation is malformed or its environment cannot support it."""


class FormatError(CipherShellError):
    """File was not produced by this tool."""


class PassphraseError(CipherShellError):
    """Passphrase entry was rejected or could not be read."""


class PassphraseAttemptsExhausted(PassphraseError):
    """No acceptable passphrase was entered within the allowed attempts."""


class CryptoError(CipherShellError):
    """Key derivation or cipher initialisation failed."""


class StreamError(CipherShellError):
    """Reading, transforming or writing the file body failed.

    Raised for wrong passphrases and corrupted files alike; the two causes are
    deliberately reported the same way.
    """
