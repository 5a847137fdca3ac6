# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Type encoder.

  <type> = <basic-type>             // one lowercase letter, never cached
         | "R" [<lifetime>] <type>  // &T
         | "Q" [<lifetime>] <type>  // &mut T
         | "P" <type>               // *const T
         | "O" <type>               // *mut T
         | "A" <type> <const>       // [T; N]
         | "S" <type>               // [T]
         | "T" {<type>} "E"         // (T1, T2, ...)
         | <backref>

Compound shapes are looked up in the type cache before anything is written;
a hit replaces the entire subtree with one backref.
"""

from __future__ import annotations

from v0mangle.core.base62 import U64_LIMIT
from v0mangle.core.errors import UnsupportedShape
from v0mangle.encoder.backref import CacheSpace
from v0mangle.encoder.shapes import (
	Array,
	Lifetime,
	OpaqueShape,
	Primitive,
	PrimitiveKind,
	RawPointer,
	Reference,
	Slice,
	Tuple,
	TypeShape,
	describe_shape,
)
from v0mangle.encoder.state import EncoderState

# Only `usize` consts are produced today (array lengths, const generics).
CONST_USIZE_TAG = PrimitiveKind.USIZE.tag


def print_lifetime(state: EncoderState, lifetime: Lifetime) -> None:
	"""`L` + base-62 index: 0 for erased, 1.. for bound lifetimes (innermost first)."""
	if lifetime.is_erased:
		index = 0
	else:
		assert lifetime.debruijn is not None
		index = state.lifetime_index(lifetime.debruijn, lifetime.var)
	state.push("L")
	state.push_integer_62(index)


def print_const_usize(state: EncoderState, value: int) -> None:
	"""
	`K` + (`j` + base-62 value | backref).

	The `K` marker stays outside the cached span: a repeated const is `KB<n>_`,
	pointing at the earlier `j`, so decoders always see `K` before a const.
	"""
	if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value < U64_LIMIT:
		raise UnsupportedShape("const generic values must be unsigned 64-bit integers", subject=repr(value))
	state.push("K")
	if state.try_backref(CacheSpace.CONSTS, (CONST_USIZE_TAG, value)):
		return
	state.push(CONST_USIZE_TAG)
	state.push_integer_62(value)


def print_type(state: EncoderState, shape: TypeShape) -> None:
	if isinstance(shape, Primitive):
		state.push(shape.kind.tag)
		return
	if isinstance(shape, Tuple) and not shape.elements:
		state.push(PrimitiveKind.UNIT.tag)
		return
	if not isinstance(shape, (Reference, RawPointer, Tuple, Array, Slice)):
		_reject(shape)

	if state.try_backref(CacheSpace.TYPES, shape):
		return

	if isinstance(shape, Reference):
		state.push("Q" if shape.mutable else "R")
		if shape.lifetime is not None:
			print_lifetime(state, shape.lifetime)
		print_type(state, shape.inner)
	elif isinstance(shape, RawPointer):
		state.push("O" if shape.mutable else "P")
		print_type(state, shape.inner)
	elif isinstance(shape, Tuple):
		state.push("T")
		for elem in shape.elements:
			print_type(state, elem)
		state.push("E")
	elif isinstance(shape, Array):
		state.push("A")
		print_type(state, shape.inner)
		print_const_usize(state, shape.length)
	else:
		state.push("S")
		print_type(state, shape.inner)


def _reject(shape: object) -> None:
	if isinstance(shape, OpaqueShape):
		raise UnsupportedShape(f"cannot encode {shape.kind} types", subject=shape.name)
	raise UnsupportedShape(
		f"cannot encode values of type {type(shape).__name__} as a type shape",
		subject=describe_shape(shape),
	)


def encode_type(shape: TypeShape) -> str:
	"""Encode a single type on a fresh state (no `_R` prefix), e.g. `TmxE`."""
	state = EncoderState()
	print_type(state, shape)
	return state.out[state.start_offset :]


__all__ = ["CONST_USIZE_TAG", "print_lifetime", "print_const_usize", "print_type", "encode_type"]
