# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Shared helpers for tests.

`demangle` expands symbols back into Rust-like text; `function_symbol` is a short
constructor for the common "crate + modules + function + generics" symbol so
test bodies stay focused on the part under test.
"""

from __future__ import annotations

from typing import Sequence

from v0mangle.encoder.shapes import GenericArgument
from v0mangle.encoder.symbol import SymbolBuilder
from v0mangle.test_support.demangle import DemangleError, demangle, parse_symbol


def function_symbol(
	crate: str,
	name: str,
	*,
	modules: Sequence[str] = (),
	crate_hash: str | None = None,
	generics: Sequence[GenericArgument] = (),
) -> str:
	"""Build and unwrap the symbol of a (possibly generic) free function."""
	builder = SymbolBuilder(crate).modules(modules).function(name).with_generics(generics)
	if crate_hash is not None:
		builder.with_hash(crate_hash)
	return builder.build().unwrap()


__all__ = ["DemangleError", "demangle", "parse_symbol", "function_symbol"]
