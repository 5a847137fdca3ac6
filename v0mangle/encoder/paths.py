# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Item paths and the path printer.

  <path> = "C" <identifier>                    // crate root
         | "M" <impl-path> <type>              // inherent impl
         | "N" <namespace> <path> <identifier> // nested path
         | "I" <path> {<generic-arg>} "E"      // generic args
         | <backref>

A nested path wraps its parent: `N` + namespace + *the whole parent path* +
disambiguator + identifier. Every prefix of a path therefore appears
verbatim in the output, and every prefix is cached as it is printed, so a
later reference to any enclosing path collapses to a single backref.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple

from v0mangle.core.crate_hash import is_crate_hash
from v0mangle.core.errors import MalformedIdentifier
from v0mangle.encoder.backref import CacheSpace
from v0mangle.encoder.state import EncoderState


class Namespace(Enum):
	"""
	Path segment namespaces.

	Lowercase tags are the "implementation-internal" namespaces (types and
	values); uppercase ones are the special namespaces. CRATE_ROOT and CLOSURE
	share the `C` character but appear in different grammar positions.
	"""

	CRATE_ROOT = "crate"
	TYPE = "type"
	VALUE = "value"
	CLOSURE = "closure"
	SHIM = "shim"

	@property
	def tag(self) -> str:
		return _NAMESPACE_TAGS[self]


_NAMESPACE_TAGS = {
	Namespace.CRATE_ROOT: "C",
	Namespace.TYPE: "t",
	Namespace.VALUE: "v",
	Namespace.CLOSURE: "C",
	Namespace.SHIM: "S",
}

# Closures and shims are routinely unnamed (`NC...0`).
_NAMESPACES_ALLOWING_EMPTY_NAME = frozenset({Namespace.CLOSURE, Namespace.SHIM})


@dataclass(frozen=True)
class CrateRoot:
	"""
	The crate segment of a path.

	`hash` is pre-encoded base-62 text printed as `s<hash>_` and takes
	precedence over the numeric `disambiguator`.
	"""

	name: str
	hash: str | None = None
	disambiguator: int = 0


@dataclass(frozen=True)
class PathSegment:
	name: str
	namespace: Namespace = Namespace.TYPE
	disambiguator: int = 0


@dataclass(frozen=True)
class ItemPath:
	"""A crate root plus nested segments, outermost first."""

	crate: CrateRoot
	segments: Tuple[PathSegment, ...] = field(default_factory=tuple)

	def prefix(self) -> "ItemPath":
		if not self.segments:
			raise ValueError("crate root path has no prefix")
		return ItemPath(self.crate, self.segments[:-1])

	def child(self, name: str, namespace: Namespace = Namespace.TYPE, disambiguator: int = 0) -> "ItemPath":
		return ItemPath(self.crate, (*self.segments, PathSegment(name, namespace, disambiguator)))

	def crate_path(self) -> "ItemPath":
		return ItemPath(self.crate, ())

	def display(self) -> str:
		return "::".join([self.crate.name, *(seg.name for seg in self.segments)])


def validate_crate_root(crate: CrateRoot) -> None:
	if not crate.name:
		raise MalformedIdentifier("crate name must not be empty", subject=crate.name)
	if crate.hash is not None and not is_crate_hash(crate.hash):
		raise MalformedIdentifier("crate hash must be non-empty base-62 text", subject=crate.hash)


def print_crate_root(state: EncoderState, crate: CrateRoot) -> None:
	validate_crate_root(crate)
	state.push("C")
	if crate.hash is not None:
		state.push(f"s{crate.hash}_")
	else:
		state.push_disambiguator(crate.disambiguator)
	state.push_ident(crate.name)


def print_path(state: EncoderState, path: ItemPath) -> None:
	"""Print `path`, or a backref to it if it has already been printed."""
	if state.try_backref(CacheSpace.PATHS, path):
		return
	if not path.segments:
		print_crate_root(state, path.crate)
		return
	seg = path.segments[-1]
	if not seg.name and seg.namespace not in _NAMESPACES_ALLOWING_EMPTY_NAME:
		raise MalformedIdentifier(
			f"empty identifier is only allowed for closure/shim segments (in {path.display()!r})",
			subject=seg.name,
		)
	state.push("N")
	state.push(seg.namespace.tag)
	print_path(state, path.prefix())
	state.push_disambiguator(seg.disambiguator)
	state.push_ident(seg.name)


def print_impl_path(state: EncoderState, enclosing: ItemPath, disambiguator: int = 0) -> None:
	"""Print `M` + disambiguator + the path of the module enclosing the impl."""
	state.push("M")
	state.push_disambiguator(disambiguator)
	print_path(state, enclosing)


def print_nested(
	state: EncoderState,
	namespace: Namespace,
	prefix: ItemPath | None,
	name: str,
	disambiguator: int = 0,
	*,
	print_prefix=None,
) -> None:
	"""
	Print `N<ns>` + prefix + disambiguator + ident with a custom prefix printer.

	Used where the prefix is not a plain ItemPath (inherent impls). Either
	`prefix` or `print_prefix` must be supplied.
	"""
	if not name and namespace not in _NAMESPACES_ALLOWING_EMPTY_NAME:
		raise MalformedIdentifier(
			f"empty identifier is only allowed for closure/shim segments (namespace {namespace.name.lower()})",
			subject=name,
		)
	state.push("N")
	state.push(namespace.tag)
	if print_prefix is not None:
		print_prefix(state)
	elif prefix is not None:
		print_path(state, prefix)
	else:
		raise ValueError("print_nested needs a prefix path or a prefix printer")
	state.push_disambiguator(disambiguator)
	state.push_ident(name)


def encode_path(path: ItemPath) -> str:
	"""Encode `path` on its own (no `_R` prefix), e.g. `NvC7mycrate3foo`."""
	state = EncoderState()
	print_path(state, path)
	return state.out[state.start_offset :]


__all__ = [
	"Namespace",
	"CrateRoot",
	"PathSegment",
	"ItemPath",
	"validate_crate_root",
	"print_crate_root",
	"print_path",
	"print_impl_path",
	"print_nested",
	"encode_path",
]
