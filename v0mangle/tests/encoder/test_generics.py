# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from v0mangle.core.errors import UnboundLifetime, UnsupportedShape
from v0mangle.encoder.generics import count_bound_lifetimes, print_generic_arg
from v0mangle.encoder.shapes import (
	BOOL,
	ERASED,
	F32,
	I8,
	I16,
	I32,
	I64,
	U8,
	U16,
	U32,
	U64,
	Array,
	ConstArg,
	Lifetime,
	LifetimeArg,
	RawPointer,
	Reference,
	Slice,
	Tuple,
	TypeArg,
)
from v0mangle.encoder.state import EncoderState
from v0mangle.test_support import demangle, function_symbol


def foo(*generics) -> str:
	return function_symbol("mycrate", "foo", generics=generics)


@pytest.mark.parametrize(
	"arg, expected",
	[
		(TypeArg(U32), "_RINvC7mycrate3foomE"),
		(TypeArg(Reference(U32)), "_RINvC7mycrate3fooRL_mE"),
		(TypeArg(Reference(U32, mutable=True)), "_RINvC7mycrate3fooQL_mE"),
		(TypeArg(RawPointer(U32)), "_RINvC7mycrate3fooPmE"),
		(TypeArg(RawPointer(U32, mutable=True)), "_RINvC7mycrate3fooOmE"),
		(TypeArg(Array(U32, 10)), "_RINvC7mycrate3fooAmKj9_E"),
		(TypeArg(Slice(U32)), "_RINvC7mycrate3fooSmE"),
		(TypeArg(Tuple((U32, I64))), "_RINvC7mycrate3fooTmxEE"),
		(LifetimeArg(ERASED), "_RINvC7mycrate3fooL_E"),
	],
)
def test_single_generic_argument(arg, expected: str) -> None:
	assert foo(arg) == expected


def test_several_type_arguments() -> None:
	assert foo(TypeArg(U32), TypeArg(I64)) == "_RINvC7mycrate3foomxE"
	assert foo(TypeArg(U32), TypeArg(I64), TypeArg(Tuple((U8, BOOL, F32)))) == "_RINvC7mycrate3foomxThbfEE"
	args = [TypeArg(t) for t in (U8, U16, U32, U64, I8, I16, I32, I64)]
	assert foo(*args) == "_RINvC7mycrate3foohtmyaslxE"


def test_repeated_tuple_argument_is_backref() -> None:
	pair = TypeArg(Tuple((U32, I64)))
	symbol = foo(pair, pair)
	assert symbol == "_RINvC7mycrate3fooTmxEBf_E"
	assert demangle(symbol) == "mycrate::foo::<(u32, i64), (u32, i64)>"


def test_repeated_const_argument_is_backref() -> None:
	symbol = foo(ConstArg(5), ConstArg(5))
	assert symbol == "_RINvC7mycrate3fooKj4_KBg_E"
	assert demangle(symbol) == "mycrate::foo::<5, 5>"


def test_array_length_and_const_argument_share_the_cache() -> None:
	symbol = foo(TypeArg(Array(U8, 4)), ConstArg(4))
	assert symbol == "_RINvC7mycrate3fooAhKj3_KBi_E"
	assert demangle(symbol) == "mycrate::foo::<[u8; 4], 4>"


def test_bound_lifetimes_count_from_innermost() -> None:
	a = Lifetime.bound(0, 0)
	b = Lifetime.bound(0, 1)
	assert foo(LifetimeArg(a), LifetimeArg(b)) == "_RINvC7mycrate3fooL1_L0_E"


def test_lifetime_inside_type_argument() -> None:
	a = Lifetime.bound(0, 0)
	symbol = foo(TypeArg(Reference(U32, lifetime=a)), LifetimeArg(a))
	assert symbol == "_RINvC7mycrate3fooRL0_mL0_E"
	assert demangle(symbol) == "mycrate::foo::<&'l1 u32, 'l1>"


def test_mixed_lifetimes_and_types() -> None:
	symbol = foo(
		LifetimeArg(Lifetime.bound(0, 0)),
		TypeArg(U32),
		LifetimeArg(Lifetime.bound(0, 1)),
		TypeArg(I64),
	)
	assert symbol == "_RINvC7mycrate3fooL1_mL0_xE"


def test_count_bound_lifetimes() -> None:
	args = [
		LifetimeArg(Lifetime.bound(0, 2)),
		TypeArg(Reference(U8, lifetime=Lifetime.bound(0, 0))),
		LifetimeArg(ERASED),
		TypeArg(U32),
	]
	assert count_bound_lifetimes(args) == 3
	assert count_bound_lifetimes([TypeArg(Reference(U8))]) == 0


def test_lifetime_outside_any_binder_is_unbound() -> None:
	with pytest.raises(UnboundLifetime):
		foo(LifetimeArg(Lifetime.bound(1, 0)))


def test_negative_lifetime_indices_are_rejected() -> None:
	with pytest.raises(ValueError):
		Lifetime.bound(-1, 0)


def test_unknown_generic_argument_is_unsupported() -> None:
	with pytest.raises(UnsupportedShape, match="generic argument"):
		print_generic_arg(EncoderState(), "u32")  # type: ignore[arg-type]


def test_const_argument_must_be_unsigned() -> None:
	with pytest.raises(UnsupportedShape):
		foo(ConstArg(-3))
	with pytest.raises(UnsupportedShape):
		foo(ConstArg(True))  # type: ignore[arg-type]
