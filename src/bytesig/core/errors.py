"""Error kinds raised while building signatures, plus a tagged build result."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from bytesig.core.signature import Signature


class SignatureError(ValueError):
    """Base class for signature construction failures."""


class InvalidArgument(SignatureError):
    """Raised for malformed input (mismatched mask, bad byte values, bad tokens)."""


class RangeError(SignatureError):
    """Raised when no unused byte value is left for the wildcard."""


class ErrorKind(Enum):
    """Tag describing why a build failed."""

    INVALID_ARGUMENT = "invalid_argument"
    RANGE = "range"


_KIND_TO_EXC: dict[ErrorKind, type[SignatureError]] = {
    ErrorKind.INVALID_ARGUMENT: InvalidArgument,
    ErrorKind.RANGE: RangeError,
}


def error_kind_of(exc: SignatureError) -> ErrorKind:
    if isinstance(exc, RangeError):
        return ErrorKind.RANGE
    return ErrorKind.INVALID_ARGUMENT


@dataclass(frozen=True)
class BuildResult:
    """Result of attempting to build a signature.

    Attributes:
        signature: The built signature (None on failure)
        error_kind: Why the build failed (None on success)
        message: Human-readable failure message (empty on success)
    """

    signature: Signature | None = None
    error_kind: ErrorKind | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    @classmethod
    def success(cls, signature: Signature) -> BuildResult:
        return cls(signature=signature)

    @classmethod
    def failure(cls, exc: SignatureError) -> BuildResult:
        return cls(error_kind=error_kind_of(exc), message=str(exc))

    def unwrap(self) -> Signature:
        """Return the signature, or raise the exception matching `error_kind`."""
        if self.error_kind is not None:
            raise _KIND_TO_EXC[self.error_kind](self.message)
        assert self.signature is not None
        return self.signature

    def to_dict(self) -> dict[str, object]:
        """Convert to JSON-serializable dict (signature reduced to its length)."""
        return {
            "ok": self.ok,
            "error_kind": self.error_kind.value if self.error_kind else None,
            "message": self.message,
            "length": len(self.signature) if self.signature is not None else None,
        }
