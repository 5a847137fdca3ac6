# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Structured errors raised by the encoder.

Encoding is all-or-nothing: any of these aborts the whole symbol and no
partial output is returned. Each class carries a stable `reason_code` so
tooling (the CLI's `--json` mode, batch manifests) can report failures
without parsing messages.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar


@dataclass(eq=False)
class ManglingError(Exception):
	"""Base class for all encoder failures."""

	message: str
	subject: str | None = None  # offending identifier / shape description, when known

	reason_code: ClassVar[str] = "mangling-error"

	def __str__(self) -> str:
		return self.format_human()

	def to_dict(self) -> dict[str, Any]:
		return {"reason_code": self.reason_code, "message": self.message, "subject": self.subject}

	def format_human(self) -> str:
		parts: list[str] = [f"[{self.reason_code}] {self.message}"]
		if self.subject is not None:
			parts.append(f"subject={self.subject!r}")
		return " ".join(parts)


class MalformedIdentifier(ManglingError):
	"""An identifier byte is outside the supported alphabet, or Punycode failed."""

	reason_code = "malformed-identifier"


class UnsupportedShape(ManglingError):
	"""A type shape outside the encodable set reached the type encoder."""

	reason_code = "unsupported-shape"


class UnboundLifetime(ManglingError):
	"""A bound lifetime refers to a binder (or variable) that is not in scope."""

	reason_code = "unbound-lifetime"


class IncompletePath(ManglingError):
	"""Raised by `BuildResult.unwrap()` when a builder had no terminal item."""

	reason_code = "incomplete-path"


__all__ = [
	"ManglingError",
	"MalformedIdentifier",
	"UnsupportedShape",
	"UnboundLifetime",
	"IncompletePath",
]
