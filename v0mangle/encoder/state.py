# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Per-symbol encoder state.

An EncoderState owns everything one encoding call mutates: the output
buffer, the backref cache, and the lifetime binder stack. It is created
fresh for each symbol and never shared, so encoders stay re-entrant and any
number of symbols can be encoded independently.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Hashable, Iterator, List

from v0mangle.core.base62 import encode_disambiguator, encode_integer_62, encode_opt_integer_62
from v0mangle.core.errors import UnboundLifetime
from v0mangle.core.ident import encode_ident
from v0mangle.encoder.backref import BackrefCache, CacheSpace

logger = logging.getLogger(__name__)

SYMBOL_PREFIX = "_R"


@dataclass(frozen=True)
class BinderLevel:
	"""
	One lifetime binder: the half-open range of depths (counted from the root
	of what is being printed) occupied by the lifetimes it binds.
	"""

	lifetime_depths: range


class EncoderState:
	"""Output buffer + backref cache + binder stack for one symbol."""

	def __init__(self, prefix: str = SYMBOL_PREFIX) -> None:
		self.out = prefix
		self.start_offset = len(prefix)
		self.backrefs = BackrefCache()
		self.binders: List[BinderLevel] = []

	def __len__(self) -> int:
		return len(self.out)

	def push(self, text: str) -> None:
		self.out += text

	def push_integer_62(self, x: int) -> None:
		self.out += encode_integer_62(x)

	def push_opt_integer_62(self, tag: str, x: int) -> None:
		self.out += encode_opt_integer_62(tag, x)

	def push_disambiguator(self, dis: int) -> None:
		self.out += encode_disambiguator(dis)

	def push_ident(self, ident: str) -> None:
		self.out += encode_ident(ident)

	def print_backref(self, offset: int) -> None:
		"""Emit `B<offset - prefix length>` for a previously recorded offset."""
		assert self.start_offset <= offset < len(self.out), (
			f"backref offset {offset} outside [{self.start_offset}, {len(self.out)})"
		)
		self.push("B")
		self.push_integer_62(offset - self.start_offset)

	def try_backref(self, space: CacheSpace, key: Hashable) -> bool:
		"""
		Emit a backref for `key` if it was seen before and return True;
		otherwise record the current offset for it and return False (the caller
		then emits the full form).
		"""
		hit = self.backrefs.lookup_or_record(space, key, len(self.out))
		if hit is None:
			return False
		logger.debug("backref hit in %s at offset %d for %r", space.value, hit, key)
		self.print_backref(hit)
		return True

	@contextmanager
	def in_binder(self, lifetimes: int) -> Iterator[BinderLevel]:
		"""Push a binder for `lifetimes` bound lifetimes for the duration of the block."""
		if lifetimes < 0:
			raise ValueError("binder lifetime count must be non-negative")
		start = self.binders[-1].lifetime_depths.stop if self.binders else 0
		level = BinderLevel(range(start, start + lifetimes))
		self.binders.append(level)
		try:
			yield level
		finally:
			self.binders.pop()

	def lifetime_index(self, debruijn: int, var: int) -> int:
		"""
		Resolve a bound lifetime to its v0 index: 1 for the innermost lifetime
		in scope, counting outwards.
		"""
		return resolve_lifetime_index(self.binders, debruijn, var)


def resolve_lifetime_index(binders: List[BinderLevel], debruijn: int, var: int) -> int:
	if debruijn >= len(binders):
		raise UnboundLifetime(
			f"lifetime refers to binder {debruijn} but only {len(binders)} binder(s) are in scope",
			subject=f"'{debruijn}.{var}",
		)
	binder = binders[len(binders) - 1 - debruijn]
	if var >= len(binder.lifetime_depths):
		raise UnboundLifetime(
			f"lifetime variable {var} is outside its binder ({len(binder.lifetime_depths)} lifetime(s))",
			subject=f"'{debruijn}.{var}",
		)
	depth = binder.lifetime_depths.start + var
	return 1 + (binders[-1].lifetime_depths.stop - 1 - depth)


__all__ = ["SYMBOL_PREFIX", "BinderLevel", "EncoderState", "resolve_lifetime_index"]
