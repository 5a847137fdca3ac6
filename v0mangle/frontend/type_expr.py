# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Rust-like type expressions -> TypeShape / GenericArgument.

Accepted syntax:

  u32  bool  str  !  ()             primitives
  &T  &mut T  &'a T  &'_ mut T      references
  *const T  *mut T                  raw pointers
  [T; 4]  [T]                       arrays, slices
  (T,)  (T, U, ...)                 tuples
  fn(T) -> U   dyn Trait   a::B<T>  parsed, but only as OpaqueShape

Generic arguments additionally accept a lifetime (`'a`, `'_`) or a decimal
const (`10`). Named lifetimes resolve against the caller's declared
lifetime list: the i-th name becomes `Lifetime.bound(0, i)`.
"""

from __future__ import annotations

from typing import Sequence

from lark import Lark, Token, Tree
from lark.exceptions import UnexpectedInput

from v0mangle.encoder.shapes import (
	ERASED,
	NEVER,
	PRIMITIVES_BY_NAME,
	UNIT,
	Array,
	ConstArg,
	GenericArgument,
	Lifetime,
	LifetimeArg,
	OpaqueShape,
	Primitive,
	RawPointer,
	Reference,
	Slice,
	Tuple,
	TypeArg,
	TypeShape,
)

_GRAMMAR_SRC = r"""
?type_expr: type
?generic_arg: type
            | LIFETIME                       -> lifetime_arg
            | INT                            -> const_arg

?type: ref_type
     | ptr_type
     | "[" type ";" INT "]"                  -> array_type
     | "[" type "]"                          -> slice_type
     | "(" ")"                               -> unit_type
     | "(" type ")"
     | "(" type "," ")"                      -> tuple_type
     | "(" type ("," type)+ ","? ")"         -> tuple_type
     | "!"                                   -> never_type
     | fn_type
     | DYN path                              -> dyn_type
     | path                                  -> path_type

ref_type: "&" LIFETIME? MUT? type
!fn_type: "fn" "(" (type ("," type)* ","?)? ")" ("->" type)?
ptr_type: "*" CONST type                     -> const_ptr
        | "*" MUT type                       -> mut_ptr

path: NAME ("::" NAME)* generic_suffix?
!generic_suffix: "<" generic_arg ("," generic_arg)* ","? ">"

MUT: "mut"
CONST: "const"
DYN: "dyn"
LIFETIME: /'[^\W\d]\w*/
NAME: /[^\W\d]\w*/
INT: /[0-9]+/

%import common.WS
%ignore WS
"""

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="basic",
	start=["type_expr", "generic_arg"],
	propagate_positions=True,
	maybe_placeholders=False,
)


class TypeExprError(ValueError):
	"""
	Error raised for unparsable or unresolvable type expressions.

	Carries the offending source text and a best-effort column.
	"""

	def __init__(self, message: str, *, source: str, column: int | None = None) -> None:
		super().__init__(message)
		self.source = source
		self.column = column


def _name(node: object) -> str:
	return node.data if isinstance(node, Tree) else ""


def _resolve_lifetime(tok: Token, src: str, lifetimes: Sequence[str]) -> Lifetime:
	text = str(tok)
	if text == "'_":
		return ERASED
	names = [lt if lt.startswith("'") else f"'{lt}" for lt in lifetimes]
	if text not in names:
		raise TypeExprError(
			f"lifetime {text} is not declared (declared: {', '.join(names) or 'none'})",
			source=src,
			column=getattr(tok, "column", None),
		)
	return Lifetime.bound(0, names.index(text))


def _slice(tree: Tree, src: str) -> str:
	meta = tree.meta
	if getattr(meta, "empty", True):
		return ""
	return " ".join(src[meta.start_pos : meta.end_pos].split())


def _build_type(node: object, src: str, lifetimes: Sequence[str]) -> TypeShape:
	if not isinstance(node, Tree):
		raise TypeExprError(f"expected a type, got token {node!r}", source=src)
	kind = _name(node)
	children = node.children
	if kind == "ref_type":
		lifetime: Lifetime | None = None
		mutable = False
		for child in children[:-1]:
			if isinstance(child, Token) and child.type == "LIFETIME":
				lifetime = _resolve_lifetime(child, src, lifetimes)
			elif isinstance(child, Token) and child.type == "MUT":
				mutable = True
		# A reference without a written lifetime carries an erased one.
		return Reference(_build_type(children[-1], src, lifetimes), mutable=mutable, lifetime=lifetime or ERASED)
	if kind == "const_ptr":
		return RawPointer(_build_type(children[-1], src, lifetimes), mutable=False)
	if kind == "mut_ptr":
		return RawPointer(_build_type(children[-1], src, lifetimes), mutable=True)
	if kind == "array_type":
		return Array(_build_type(children[0], src, lifetimes), int(str(children[1])))
	if kind == "slice_type":
		return Slice(_build_type(children[0], src, lifetimes))
	if kind == "unit_type":
		return UNIT
	if kind == "never_type":
		return NEVER
	if kind == "tuple_type":
		return Tuple(tuple(_build_type(c, src, lifetimes) for c in children))
	if kind == "fn_type":
		return OpaqueShape("fn-pointer", _slice(node, src))
	if kind == "dyn_type":
		return OpaqueShape("trait-object", _slice(node, src))
	if kind == "path_type":
		path = children[0]
		names = [str(t) for t in path.children if isinstance(t, Token) and t.type == "NAME"]
		has_args = any(_name(c) == "generic_suffix" for c in path.children)
		if len(names) == 1 and not has_args and names[0] in PRIMITIVES_BY_NAME:
			return Primitive(PRIMITIVES_BY_NAME[names[0]])
		return OpaqueShape("nominal", _slice(node, src))
	raise TypeExprError(f"unexpected type node {kind!r}", source=src)


def _parse(text: str, start: str) -> object:
	try:
		return _PARSER.parse(text, start=start)
	except UnexpectedInput as exc:
		raise TypeExprError(
			f"cannot parse type expression {text!r}: {exc.__class__.__name__} at column {exc.column}",
			source=text,
			column=exc.column,
		) from exc


def parse_type(text: str, lifetimes: Sequence[str] = ()) -> TypeShape:
	"""Parse a type expression into a TypeShape."""
	return _build_type(_parse(text, "type_expr"), text, lifetimes)


def parse_generic_arg(text: str, lifetimes: Sequence[str] = ()) -> GenericArgument:
	"""Parse a generic argument: a type, a lifetime, or a decimal usize const."""
	tree = _parse(text, "generic_arg")
	if isinstance(tree, Tree) and tree.data == "lifetime_arg":
		return LifetimeArg(_resolve_lifetime(tree.children[0], text, lifetimes))
	if isinstance(tree, Tree) and tree.data == "const_arg":
		return ConstArg(int(str(tree.children[0])))
	return TypeArg(_build_type(tree, text, lifetimes))


def parse_generic_args(texts: Sequence[str], lifetimes: Sequence[str] = ()) -> list[GenericArgument]:
	return [parse_generic_arg(t, lifetimes) for t in texts]


__all__ = ["TypeExprError", "parse_type", "parse_generic_arg", "parse_generic_args"]
