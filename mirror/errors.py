"""
Error types for evm-mirror.

Fatal errors abort the operation they occur in (a single address, or a
whole clone). Recoverable ones are caught by the caller and turned into
a result entry or a logged fallback.
"""

from typing import Optional


class MirrorError(Exception):
    """Base class for every error raised by evm-mirror."""


class VerificationError(MirrorError):
    """The contract is not verified, does not exist, or the payload is incomplete."""

    def __init__(self, address: str, reason: str = "The contract is not verified or does not exist"):
        self.address = address
        self.reason = reason
        super().__init__(f"{reason}: {address}")


class ExplorerAPIError(MirrorError):
    """The explorer answered with an error status or could not be reached."""


class UnsupportedNetworkError(MirrorError):
    """No explorer endpoint is known for the requested chain id."""

    def __init__(self, chain_id: str):
        self.chain_id = chain_id
        super().__init__(f"Network not supported: {chain_id}")


class InvalidAddressError(MirrorError):
    """The given string is not a 0x-prefixed 20 byte hex address."""

    def __init__(self, address: str):
        self.address = address
        super().__init__(f"Invalid address: {address}")


class MalformedSourceJson(MirrorError):
    """A Standard JSON Input envelope could not be decoded."""


class LocalFileNotFound(MirrorError):
    """The local counterpart of a reported file does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"File not found: {path}")


class LocalFileReadError(MirrorError):
    """The local counterpart exists but could not be read."""

    def __init__(self, path: str, cause: Optional[BaseException] = None):
        self.path = path
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Error reading local file {path}{detail}")


class OverwriteConflict(MirrorError):
    """A file already exists in the output directory with different content."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(
            f"File already exists with different content: {path}\n"
            "Aborting to prevent overwriting existing work."
        )


class UnsafeSourcePath(MirrorError):
    """A reported path would escape the output directory."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Unsafe source path: {path!r}")


class InvalidCompilerVersion(MirrorError):
    """No X.Y.Z version could be found in the compiler identifier."""


class SourceInvariantError(MirrorError):
    """A source set holds a value that is not file text."""
