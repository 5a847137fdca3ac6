# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Diagnostic record for recoverable construction failures.

Encoding failures (bad identifiers, unsupported shapes) are exceptions;
configuration mistakes caught by `SymbolBuilder.build()` (no terminal item,
empty crate name) are reported as Diagnostics inside a failed BuildResult so
batch tooling can collect them per item.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Diagnostic:
	"""Represents a builder/manifest diagnostic (error/warning)."""

	message: str
	code: str | None = None
	# Which layer produced it: "build", "manifest", "encode", "cli".
	phase: str | None = None
	severity: str = "error"
	# Free-form locator, e.g. the manifest item index or the item path text.
	subject: str | None = None
	notes: list[str] = field(default_factory=list)

	def to_dict(self) -> dict[str, Any]:
		return {
			"phase": self.phase,
			"code": self.code,
			"message": self.message,
			"severity": self.severity,
			"subject": self.subject,
			"notes": list(self.notes),
		}

	def format_human(self) -> str:
		where = f"{self.subject}: " if self.subject else ""
		return f"{where}{self.severity}: {self.message}"


__all__ = ["Diagnostic"]
