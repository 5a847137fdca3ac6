# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Closed set of type shapes and generic arguments the encoder understands.

Shapes are frozen dataclasses, so two structurally identical shapes compare
and hash equal; the backref cache relies on that (identity is structure, not
allocation). Every compound shape owns its children and trees are acyclic.

`OpaqueShape` is the one escape hatch: front ends use it for things they can
describe but the encoder cannot emit (nominal types, fn pointers, trait
objects, closures). Encoding one is an UnsupportedShape error.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class PrimitiveKind(Enum):
	"""Primitive types; the value is the single-character v0 tag."""

	BOOL = "b"
	CHAR = "c"
	I8 = "a"
	I16 = "s"
	I32 = "l"
	I64 = "x"
	I128 = "n"
	ISIZE = "i"
	U8 = "h"
	U16 = "t"
	U32 = "m"
	U64 = "y"
	U128 = "o"
	USIZE = "j"
	F32 = "f"
	F64 = "d"
	STR = "e"
	NEVER = "z"
	UNIT = "u"

	@property
	def tag(self) -> str:
		return self.value

	@property
	def rust_name(self) -> str:
		return _RUST_NAMES[self]


_RUST_NAMES = {
	PrimitiveKind.BOOL: "bool",
	PrimitiveKind.CHAR: "char",
	PrimitiveKind.I8: "i8",
	PrimitiveKind.I16: "i16",
	PrimitiveKind.I32: "i32",
	PrimitiveKind.I64: "i64",
	PrimitiveKind.I128: "i128",
	PrimitiveKind.ISIZE: "isize",
	PrimitiveKind.U8: "u8",
	PrimitiveKind.U16: "u16",
	PrimitiveKind.U32: "u32",
	PrimitiveKind.U64: "u64",
	PrimitiveKind.U128: "u128",
	PrimitiveKind.USIZE: "usize",
	PrimitiveKind.F32: "f32",
	PrimitiveKind.F64: "f64",
	PrimitiveKind.STR: "str",
	PrimitiveKind.NEVER: "!",
	PrimitiveKind.UNIT: "()",
}

PRIMITIVES_BY_NAME = {name: kind for kind, name in _RUST_NAMES.items()}


@dataclass(frozen=True)
class Lifetime:
	"""
	A lifetime argument.

	Erased lifetimes have `debruijn is None`. Bound lifetimes name a binder by
	De Bruijn distance (0 = innermost enclosing binder) and a variable index
	within that binder.
	"""

	debruijn: int | None = None
	var: int = 0

	@classmethod
	def erased(cls) -> "Lifetime":
		return cls()

	@classmethod
	def bound(cls, debruijn: int, var: int) -> "Lifetime":
		if debruijn < 0 or var < 0:
			raise ValueError("bound lifetime indices must be non-negative")
		return cls(debruijn=debruijn, var=var)

	@property
	def is_erased(self) -> bool:
		return self.debruijn is None


ERASED = Lifetime.erased()


@dataclass(frozen=True)
class Primitive:
	kind: PrimitiveKind


@dataclass(frozen=True)
class Reference:
	"""`&T` / `&mut T`. `lifetime=None` omits the lifetime from the output."""

	inner: "TypeShape"
	mutable: bool = False
	lifetime: Lifetime | None = ERASED


@dataclass(frozen=True)
class RawPointer:
	inner: "TypeShape"
	mutable: bool = False


@dataclass(frozen=True)
class Tuple:
	elements: tuple["TypeShape", ...]

	def __post_init__(self) -> None:
		if not isinstance(self.elements, tuple):
			object.__setattr__(self, "elements", tuple(self.elements))


@dataclass(frozen=True)
class Array:
	inner: "TypeShape"
	length: int


@dataclass(frozen=True)
class Slice:
	inner: "TypeShape"


@dataclass(frozen=True)
class OpaqueShape:
	"""A described shape the encoder refuses: kind is e.g. "nominal", "fn-pointer"."""

	kind: str
	name: str


TypeShape = Union[Primitive, Reference, RawPointer, Tuple, Array, Slice, OpaqueShape]


def tuple_of(*elements: TypeShape) -> TypeShape:
	"""Build a tuple shape; the empty tuple is the unit primitive."""
	if not elements:
		return UNIT
	return Tuple(tuple(elements))


@dataclass(frozen=True)
class TypeArg:
	shape: TypeShape


@dataclass(frozen=True)
class LifetimeArg:
	lifetime: Lifetime


@dataclass(frozen=True)
class ConstArg:
	"""A const generic argument; only `usize` values are supported."""

	value: int


GenericArgument = Union[TypeArg, LifetimeArg, ConstArg]


BOOL = Primitive(PrimitiveKind.BOOL)
CHAR = Primitive(PrimitiveKind.CHAR)
I8 = Primitive(PrimitiveKind.I8)
I16 = Primitive(PrimitiveKind.I16)
I32 = Primitive(PrimitiveKind.I32)
I64 = Primitive(PrimitiveKind.I64)
I128 = Primitive(PrimitiveKind.I128)
ISIZE = Primitive(PrimitiveKind.ISIZE)
U8 = Primitive(PrimitiveKind.U8)
U16 = Primitive(PrimitiveKind.U16)
U32 = Primitive(PrimitiveKind.U32)
U64 = Primitive(PrimitiveKind.U64)
U128 = Primitive(PrimitiveKind.U128)
USIZE = Primitive(PrimitiveKind.USIZE)
F32 = Primitive(PrimitiveKind.F32)
F64 = Primitive(PrimitiveKind.F64)
STR = Primitive(PrimitiveKind.STR)
NEVER = Primitive(PrimitiveKind.NEVER)
UNIT = Primitive(PrimitiveKind.UNIT)


def describe_shape(shape: object) -> str:
	"""Render a shape as Rust-like text (used in error messages and tests)."""
	if isinstance(shape, Primitive):
		return shape.kind.rust_name
	if isinstance(shape, Reference):
		lt = ""
		if shape.lifetime is not None:
			lt = "'_ " if shape.lifetime.is_erased else f"'{shape.lifetime.debruijn}.{shape.lifetime.var} "
		return f"&{lt}{'mut ' if shape.mutable else ''}{describe_shape(shape.inner)}"
	if isinstance(shape, RawPointer):
		return f"*{'mut' if shape.mutable else 'const'} {describe_shape(shape.inner)}"
	if isinstance(shape, Tuple):
		inner = ", ".join(describe_shape(e) for e in shape.elements)
		return f"({inner},)" if len(shape.elements) == 1 else f"({inner})"
	if isinstance(shape, Array):
		return f"[{describe_shape(shape.inner)}; {shape.length}]"
	if isinstance(shape, Slice):
		return f"[{describe_shape(shape.inner)}]"
	if isinstance(shape, OpaqueShape):
		return f"{shape.kind} {shape.name}"
	return f"<{type(shape).__name__}>"


__all__ = [
	"PrimitiveKind",
	"PRIMITIVES_BY_NAME",
	"Lifetime",
	"ERASED",
	"Primitive",
	"Reference",
	"RawPointer",
	"Tuple",
	"Array",
	"Slice",
	"OpaqueShape",
	"TypeShape",
	"tuple_of",
	"TypeArg",
	"LifetimeArg",
	"ConstArg",
	"GenericArgument",
	"describe_shape",
	"BOOL",
	"CHAR",
	"I8",
	"I16",
	"I32",
	"I64",
	"I128",
	"ISIZE",
	"U8",
	"U16",
	"U32",
	"U64",
	"U128",
	"USIZE",
	"F32",
	"F64",
	"STR",
	"NEVER",
	"UNIT",
]
