# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from v0mangle import SymbolBuilder
from v0mangle.encoder.shapes import (
	ERASED,
	I64,
	NEVER,
	STR,
	U8,
	U32,
	UNIT,
	Array,
	ConstArg,
	Lifetime,
	LifetimeArg,
	OpaqueShape,
	RawPointer,
	Reference,
	Slice,
	Tuple,
	TypeArg,
)
from v0mangle.frontend.type_expr import TypeExprError, parse_generic_arg, parse_generic_args, parse_type


@pytest.mark.parametrize(
	"text, shape",
	[
		("u32", U32),
		("str", STR),
		("!", NEVER),
		("()", UNIT),
		("(u32)", U32),
		("&u32", Reference(U32)),
		("&'_ str", Reference(STR)),
		("&mut u32", Reference(U32, mutable=True)),
		("*const u8", RawPointer(U8)),
		("*mut u8", RawPointer(U8, mutable=True)),
		("[u32; 10]", Array(U32, 10)),
		("[u8]", Slice(U8)),
		("(u32,)", Tuple((U32,))),
		("(u32, i64)", Tuple((U32, I64))),
		("(u32, i64,)", Tuple((U32, I64))),
	],
)
def test_parse_type(text: str, shape) -> None:
	assert parse_type(text) == shape


def test_nested_types() -> None:
	assert parse_type("&[&mut u32]") == Reference(Slice(Reference(U32, mutable=True)))
	assert parse_type("[(u8, &str); 4]") == Array(Tuple((U8, Reference(STR))), 4)


def test_named_lifetimes_resolve_by_position() -> None:
	assert parse_type("&'a u32", ["a"]) == Reference(U32, lifetime=Lifetime.bound(0, 0))
	assert parse_type("&'b mut u8", ["'a", "'b"]) == Reference(U8, mutable=True, lifetime=Lifetime.bound(0, 1))


def test_undeclared_lifetime() -> None:
	with pytest.raises(TypeExprError, match="not declared"):
		parse_type("&'a u32")


def test_non_primitive_types_parse_as_opaque() -> None:
	assert parse_type("Vec<u8>") == OpaqueShape("nominal", "Vec<u8>")
	assert parse_type("std::string::String") == OpaqueShape("nominal", "std::string::String")
	assert parse_type("fn(u32) -> u8") == OpaqueShape("fn-pointer", "fn(u32) -> u8")
	assert parse_type("dyn Display") == OpaqueShape("trait-object", "dyn Display")


def test_keywords_only_match_whole_words() -> None:
	assert parse_type("mutex") == OpaqueShape("nominal", "mutex")


@pytest.mark.parametrize("text", ["&", "[u32; ]", "u32 u32", "(u32", "*u8", "#"])
def test_syntax_errors(text: str) -> None:
	with pytest.raises(TypeExprError) as excinfo:
		parse_type(text)
	assert isinstance(excinfo.value, ValueError)
	assert excinfo.value.source == text


def test_generic_arguments() -> None:
	assert parse_generic_arg("u8") == TypeArg(U8)
	assert parse_generic_arg("'_") == LifetimeArg(ERASED)
	assert parse_generic_arg("10") == ConstArg(10)
	assert parse_generic_arg("'a", ["a"]) == LifetimeArg(Lifetime.bound(0, 0))


def test_parsed_arguments_drive_the_encoder() -> None:
	args = parse_generic_args(["&'a u32", "'a"], ["a"])
	symbol = SymbolBuilder("mycrate").function("foo").with_generics(args).build().unwrap()
	assert symbol == "_RINvC7mycrate3fooRL0_mL0_E"

	args = parse_generic_args(["(u32, i64)", "(u32, i64)"])
	symbol = SymbolBuilder("mycrate").function("foo").with_generics(args).build().unwrap()
	assert symbol == "_RINvC7mycrate3fooTmxEBf_E"
