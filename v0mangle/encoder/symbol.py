# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Symbol assembly.

`SymbolConfig` is the configuration record for one symbol; `SymbolBuilder`
is a fluent front for filling it in field by field. `build()` validates the
record and encodes it on a fresh EncoderState:

  plain item   _R N<ns> <enclosing path> <ident>
  method       _R Nv M[s<n>_] <enclosing path> Nt B<enclosing> <type ident> <method ident>
  generic      _R I <item path> {<generic-arg>} E
  + optional instantiating-crate suffix: a backref to the crate root

Configuration mistakes (no terminal item, empty crate name, out-of-range
disambiguators) come back as diagnostics in a failed BuildResult. Encoding
failures (malformed
identifiers, unsupported shapes, unbound lifetimes) are raised.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Sequence, Union

from v0mangle.core.base62 import U64_LIMIT
from v0mangle.core.diagnostics import Diagnostic
from v0mangle.core.errors import IncompletePath
from v0mangle.encoder.backref import CacheSpace
from v0mangle.encoder.generics import print_instantiation
from v0mangle.encoder.paths import (
	CrateRoot,
	ItemPath,
	Namespace,
	PathSegment,
	print_impl_path,
	print_nested,
	print_path,
)
from v0mangle.encoder.shapes import (
	ConstArg,
	GenericArgument,
	Lifetime,
	LifetimeArg,
	TypeArg,
	TypeShape,
)
from v0mangle.encoder.state import EncoderState

logger = logging.getLogger(__name__)


class ItemKind(Enum):
	FUNCTION = "function"
	STATIC = "static"
	CONST = "const"
	TYPE = "type"

	@property
	def namespace(self) -> Namespace:
		return Namespace.TYPE if self is ItemKind.TYPE else Namespace.VALUE


@dataclass(frozen=True)
class ItemTerminal:
	"""A free item (function, static, const, or type) closing the path."""

	kind: ItemKind
	name: str
	disambiguator: int = 0


@dataclass(frozen=True)
class MethodTerminal:
	"""An inherent method: `impl <type_name> { fn <method_name> }`."""

	type_name: str
	method_name: str
	impl_disambiguator: int = 0
	type_disambiguator: int = 0
	method_disambiguator: int = 0


Terminal = Union[ItemTerminal, MethodTerminal]


@dataclass
class SymbolConfig:
	"""Everything needed to encode one symbol."""

	crate_name: str
	crate_hash: str | None = None
	crate_disambiguator: int = 0
	segments: List[PathSegment] = field(default_factory=list)
	terminal: Terminal | None = None
	generics: List[GenericArgument] = field(default_factory=list)
	bound_lifetimes: int | None = None
	instantiating_crate: bool = False

	def crate_root(self) -> CrateRoot:
		return CrateRoot(self.crate_name, self.crate_hash, self.crate_disambiguator)

	def enclosing_path(self) -> ItemPath:
		return ItemPath(self.crate_root(), tuple(self.segments))

	def validate(self) -> list[Diagnostic]:
		diagnostics: list[Diagnostic] = []
		if not self.crate_name:
			diagnostics.append(
				Diagnostic(
					message="crate name must not be empty",
					code="empty-crate-name",
					phase="build",
				)
			)
		if self.terminal is None:
			where = "::".join([self.crate_name or "<crate>", *(s.name for s in self.segments)])
			diagnostics.append(
				Diagnostic(
					message="symbol has no terminal item; call function()/static()/const()/type()/method() before build()",
					code=IncompletePath.reason_code,
					phase="build",
					subject=where,
				)
			)
		for subject, value in self._disambiguators():
			if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value < U64_LIMIT:
				diagnostics.append(
					Diagnostic(
						message=f"disambiguator {value!r} is outside the unsigned 64-bit range",
						code="bad-disambiguator",
						phase="build",
						subject=subject,
					)
				)
		return diagnostics

	def _disambiguators(self) -> list[tuple[str, object]]:
		found: list[tuple[str, object]] = [(self.crate_name, self.crate_disambiguator)]
		found.extend((seg.name, seg.disambiguator) for seg in self.segments)
		terminal = self.terminal
		if isinstance(terminal, ItemTerminal):
			found.append((terminal.name, terminal.disambiguator))
		elif isinstance(terminal, MethodTerminal):
			found.append((f"impl {terminal.type_name}", terminal.impl_disambiguator))
			found.append((terminal.type_name, terminal.type_disambiguator))
			found.append((terminal.method_name, terminal.method_disambiguator))
		return found


@dataclass
class BuildResult:
	ok: bool
	symbol: str | None = None
	diagnostics: list[Diagnostic] = field(default_factory=list)

	def unwrap(self) -> str:
		"""Return the symbol, or raise IncompletePath carrying the first diagnostic."""
		if self.ok and self.symbol is not None:
			return self.symbol
		first = self.diagnostics[0] if self.diagnostics else Diagnostic(message="build failed")
		raise IncompletePath(first.message, subject=first.subject)


def _print_item(state: EncoderState, config: SymbolConfig) -> None:
	terminal = config.terminal
	enclosing = config.enclosing_path()
	if isinstance(terminal, ItemTerminal):
		print_path(state, enclosing.child(terminal.name, terminal.kind.namespace, terminal.disambiguator))
		return
	assert isinstance(terminal, MethodTerminal)

	def print_self_type(st: EncoderState) -> None:
		# The self type's path reuses the enclosing path already printed by
		# the impl prefix, so it always collapses to a backref here.
		print_nested(st, Namespace.TYPE, enclosing, terminal.type_name, terminal.type_disambiguator)

	def print_impl(st: EncoderState) -> None:
		print_impl_path(st, enclosing, terminal.impl_disambiguator)
		print_self_type(st)

	print_nested(
		state,
		Namespace.VALUE,
		None,
		terminal.method_name,
		terminal.method_disambiguator,
		print_prefix=print_impl,
	)


def _item_key(config: SymbolConfig) -> tuple:
	return (config.enclosing_path(), config.terminal)


def encode_symbol(config: SymbolConfig) -> str:
	"""Encode an already validated config; raises on encoding errors."""
	state = EncoderState()
	if config.generics:
		print_instantiation(
			state,
			_item_key(config),
			lambda st: _print_item(st, config),
			config.generics,
			bound_lifetimes=config.bound_lifetimes,
		)
	else:
		_print_item(state, config)
	if config.instantiating_crate:
		print_path(state, config.enclosing_path().crate_path())
	logger.debug("encoded %s (%d paths, %d types, %d consts cached)", state.out, *_cache_sizes(state))
	return state.out


def _cache_sizes(state: EncoderState) -> tuple[int, int, int]:
	return (
		state.backrefs.size(CacheSpace.PATHS),
		state.backrefs.size(CacheSpace.TYPES),
		state.backrefs.size(CacheSpace.CONSTS),
	)


def build_symbol(config: SymbolConfig) -> BuildResult:
	diagnostics = config.validate()
	if diagnostics:
		return BuildResult(ok=False, diagnostics=diagnostics)
	return BuildResult(ok=True, symbol=encode_symbol(config))


def mangle(config: SymbolConfig) -> str:
	"""Functional form of `build_symbol(config).unwrap()`."""
	return build_symbol(config).unwrap()


class SymbolBuilder:
	"""
	Fluent front for SymbolConfig.

	  SymbolBuilder("mycrate").module("inner").function("foo").with_type_param(U32).build()

	Every method returns the builder; nothing is validated until `build()`.
	"""

	def __init__(self, crate_name: str) -> None:
		self.config = SymbolConfig(crate_name=crate_name)

	def with_hash(self, crate_hash: str) -> "SymbolBuilder":
		self.config.crate_hash = crate_hash
		return self

	def with_crate_disambiguator(self, disambiguator: int) -> "SymbolBuilder":
		self.config.crate_disambiguator = disambiguator
		return self

	def segment(self, name: str, namespace: Namespace = Namespace.TYPE, disambiguator: int = 0) -> "SymbolBuilder":
		self.config.segments.append(PathSegment(name, namespace, disambiguator))
		return self

	def module(self, name: str, disambiguator: int = 0) -> "SymbolBuilder":
		return self.segment(name, Namespace.TYPE, disambiguator)

	def modules(self, names: Sequence[str]) -> "SymbolBuilder":
		for name in names:
			self.module(name)
		return self

	def item(self, kind: ItemKind, name: str, disambiguator: int = 0) -> "SymbolBuilder":
		self.config.terminal = ItemTerminal(kind, name, disambiguator)
		return self

	def function(self, name: str, disambiguator: int = 0) -> "SymbolBuilder":
		return self.item(ItemKind.FUNCTION, name, disambiguator)

	def static(self, name: str, disambiguator: int = 0) -> "SymbolBuilder":
		return self.item(ItemKind.STATIC, name, disambiguator)

	def const(self, name: str, disambiguator: int = 0) -> "SymbolBuilder":
		return self.item(ItemKind.CONST, name, disambiguator)

	def type(self, name: str, disambiguator: int = 0) -> "SymbolBuilder":
		return self.item(ItemKind.TYPE, name, disambiguator)

	def method(
		self,
		type_name: str,
		method_name: str,
		*,
		impl_disambiguator: int = 0,
		type_disambiguator: int = 0,
		method_disambiguator: int = 0,
	) -> "SymbolBuilder":
		self.config.terminal = MethodTerminal(
			type_name,
			method_name,
			impl_disambiguator=impl_disambiguator,
			type_disambiguator=type_disambiguator,
			method_disambiguator=method_disambiguator,
		)
		return self

	def with_type_param(self, shape: TypeShape) -> "SymbolBuilder":
		self.config.generics.append(TypeArg(shape))
		return self

	def with_lifetime(self, lifetime: Lifetime) -> "SymbolBuilder":
		self.config.generics.append(LifetimeArg(lifetime))
		return self

	def with_const_param(self, value: int) -> "SymbolBuilder":
		self.config.generics.append(ConstArg(value))
		return self

	def with_generics(self, args: Sequence[GenericArgument]) -> "SymbolBuilder":
		self.config.generics.extend(args)
		return self

	def with_bound_lifetimes(self, count: int) -> "SymbolBuilder":
		self.config.bound_lifetimes = count
		return self

	def with_instantiating_crate(self, enabled: bool = True) -> "SymbolBuilder":
		self.config.instantiating_crate = enabled
		return self

	def build(self) -> BuildResult:
		return build_symbol(self.config)


__all__ = [
	"ItemKind",
	"ItemTerminal",
	"MethodTerminal",
	"Terminal",
	"SymbolConfig",
	"BuildResult",
	"SymbolBuilder",
	"build_symbol",
	"encode_symbol",
	"mangle",
]
