# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Adapter from reflection-style scalar reports to primitive kinds.

Reflection facilities report scalars as a category plus a byte width; the
width is what separates `u32` from `u64`. Widths the v0 grammar has no
single-letter tag for (f16, f128) must fail loudly rather than fall back to
some other tag.
"""

from __future__ import annotations

from v0mangle.core.errors import UnsupportedShape
from v0mangle.encoder.shapes import Primitive, PrimitiveKind

_SIGNED_BY_SIZE = {
	1: PrimitiveKind.I8,
	2: PrimitiveKind.I16,
	4: PrimitiveKind.I32,
	8: PrimitiveKind.I64,
	16: PrimitiveKind.I128,
}
_UNSIGNED_BY_SIZE = {
	1: PrimitiveKind.U8,
	2: PrimitiveKind.U16,
	4: PrimitiveKind.U32,
	8: PrimitiveKind.U64,
	16: PrimitiveKind.U128,
}
_FLOAT_BY_SIZE = {
	4: PrimitiveKind.F32,
	8: PrimitiveKind.F64,
}
_FIXED = {
	"bool": PrimitiveKind.BOOL,
	"char": PrimitiveKind.CHAR,
	"str": PrimitiveKind.STR,
	"never": PrimitiveKind.NEVER,
	"unit": PrimitiveKind.UNIT,
}


def primitive_for_scalar(
	category: str,
	*,
	signed: bool = False,
	size: int | None = None,
	pointer_sized: bool = False,
) -> PrimitiveKind:
	"""
	Map a scalar report to its PrimitiveKind.

	Args:
	  category: "integer", "float", "bool", "char", "str", "never" or "unit".
	  signed: integer signedness.
	  size: byte width for integers/floats.
	  pointer_sized: integer is `isize`/`usize` regardless of `size`.
	"""
	if category in _FIXED:
		return _FIXED[category]
	if category == "integer":
		if pointer_sized:
			return PrimitiveKind.ISIZE if signed else PrimitiveKind.USIZE
		table = _SIGNED_BY_SIZE if signed else _UNSIGNED_BY_SIZE
		kind = table.get(size) if size is not None else None
		if kind is None:
			raise UnsupportedShape(
				f"no {'signed' if signed else 'unsigned'} integer tag for a {size}-byte width",
				subject=f"integer/{size}",
			)
		return kind
	if category == "float":
		kind = _FLOAT_BY_SIZE.get(size) if size is not None else None
		if kind is None:
			raise UnsupportedShape(f"no float tag for a {size}-byte width", subject=f"float/{size}")
		return kind
	raise UnsupportedShape(f"unknown scalar category {category!r}", subject=category)


def primitive_shape(category: str, **kwargs) -> Primitive:
	return Primitive(primitive_for_scalar(category, **kwargs))


__all__ = ["primitive_for_scalar", "primitive_shape"]
