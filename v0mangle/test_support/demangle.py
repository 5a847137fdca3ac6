# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Test-only v0 decoder.

Reads what the encoder writes and renders it as Rust-like text with every
backref expanded, so tests can assert that a symbol full of `B..._` pointers
still *means* the right thing:

  _RINvC7mycrate3fooTmxEBf_E  ->  mycrate::foo::<(u32, i64), (u32, i64)>

Coverage matches the encoder's output: crate roots, nested paths, inherent
and trait impl paths, generic args, the type grammar without fn pointers or
trait objects, and `usize` consts in this package's base-62 form. Bound
lifetimes render as `'l<index>`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, TypeVar

from v0mangle.core.base62 import parse_integer_62
from v0mangle.encoder.shapes import PrimitiveKind

T = TypeVar("T")

_BASIC_TYPES = {kind.tag: kind.rust_name for kind in PrimitiveKind}
_PATH_STARTS = "CMXYNI"
_SPECIAL_NAMESPACES = {"C": "closure", "S": "shim"}


class DemangleError(ValueError):
	pass


@dataclass
class Demangled:
	text: str
	instantiating_crate: str | None = None


class _Parser:
	def __init__(self, sym: str, pos: int) -> None:
		self.sym = sym
		self.pos = pos

	def peek(self) -> str:
		return self.sym[self.pos] if self.pos < len(self.sym) else ""

	def next(self) -> str:
		if self.pos >= len(self.sym):
			raise DemangleError(f"unexpected end of symbol {self.sym!r}")
		ch = self.sym[self.pos]
		self.pos += 1
		return ch

	def eat(self, ch: str) -> bool:
		if self.peek() == ch:
			self.pos += 1
			return True
		return False

	def integer_62(self) -> int:
		try:
			value, self.pos = parse_integer_62(self.sym, self.pos)
		except ValueError as exc:
			raise DemangleError(str(exc)) from exc
		return value

	def opt_integer_62(self, tag: str) -> int:
		if not self.eat(tag):
			return 0
		return self.integer_62() + 1

	def disambiguator(self) -> int:
		return self.opt_integer_62("s")

	def ident(self) -> str:
		punycode = self.eat("u")
		start = self.pos
		while self.peek().isdigit():
			self.pos += 1
		if start == self.pos:
			raise DemangleError(f"expected identifier length at offset {start}")
		length = int(self.sym[start : self.pos])
		self.eat("_")
		text = self.sym[self.pos : self.pos + length]
		if len(text) != length:
			raise DemangleError(f"identifier at offset {start} runs past the end")
		self.pos += length
		if not punycode:
			return text
		basic, sep, deltas = text.rpartition("_")
		encoded = f"{basic}-{deltas}" if sep else deltas
		try:
			return encoded.encode("ascii").decode("punycode")
		except UnicodeError as exc:
			raise DemangleError(f"bad punycode identifier {text!r}") from exc

	def backref(self, parse: Callable[["_Parser"], T]) -> T:
		here = self.pos - 1
		target = 2 + self.integer_62()
		if target >= here:
			raise DemangleError(f"backref at offset {here} does not point backwards")
		return parse(_Parser(self.sym, target))

	def path(self) -> str:
		tag = self.next()
		if tag == "C":
			self.disambiguator()
			return self.ident()
		if tag == "N":
			ns = self.next()
			parent = self.path()
			dis = self.disambiguator()
			name = self.ident()
			if ns.isupper():
				label = _SPECIAL_NAMESPACES.get(ns, ns)
				inner = f"{label}:{name}" if name else label
				return f"{parent}::{{{inner}#{dis}}}"
			return f"{parent}::{name}"
		if tag == "M":
			self.disambiguator()
			self.path()
			return f"<{self.type()}>"
		if tag == "X":
			self.disambiguator()
			self.path()
			self_ty = self.type()
			return f"<{self_ty} as {self.path()}>"
		if tag == "Y":
			self_ty = self.type()
			return f"<{self_ty} as {self.path()}>"
		if tag == "I":
			base = self.path()
			args: list[str] = []
			while not self.eat("E"):
				args.append(self.generic_arg())
			return f"{base}::<{', '.join(args)}>"
		if tag == "B":
			return self.backref(_Parser.path)
		raise DemangleError(f"unexpected path tag {tag!r} at offset {self.pos - 1}")

	def lifetime(self) -> str:
		index = self.integer_62()
		return "'_" if index == 0 else f"'l{index}"

	def generic_arg(self) -> str:
		if self.eat("L"):
			return self.lifetime()
		if self.eat("K"):
			return self.const()
		return self.type()

	def const(self) -> str:
		tag = self.next()
		if tag == "B":
			return self.backref(_Parser.const)
		if tag == "p":
			return "_"
		if tag not in _BASIC_TYPES:
			raise DemangleError(f"unexpected const type {tag!r} at offset {self.pos - 1}")
		return str(self.integer_62())

	def type(self) -> str:
		tag = self.peek()
		if tag in _BASIC_TYPES:
			self.pos += 1
			return _BASIC_TYPES[tag]
		if tag and tag in _PATH_STARTS:
			return self.path()
		tag = self.next()
		if tag in "RQ":
			lifetime = ""
			if self.eat("L"):
				lt = self.lifetime()
				lifetime = "" if lt == "'_" else f"{lt} "
			mut = "mut " if tag == "Q" else ""
			return f"&{lifetime}{mut}{self.type()}"
		if tag == "P":
			return f"*const {self.type()}"
		if tag == "O":
			return f"*mut {self.type()}"
		if tag == "A":
			elem = self.type()
			if not self.eat("K"):
				raise DemangleError(f"array length must be a const at offset {self.pos}")
			return f"[{elem}; {self.const()}]"
		if tag == "S":
			return f"[{self.type()}]"
		if tag == "T":
			elems: list[str] = []
			while not self.eat("E"):
				elems.append(self.type())
			if len(elems) == 1:
				return f"({elems[0]},)"
			return f"({', '.join(elems)})"
		if tag == "B":
			return self.backref(_Parser.type)
		raise DemangleError(f"unsupported type tag {tag!r} at offset {self.pos - 1}")


def parse_symbol(symbol: str) -> Demangled:
	if not symbol.startswith("_R"):
		raise DemangleError(f"not a v0 symbol: {symbol!r}")
	parser = _Parser(symbol, 2)
	text = parser.path()
	crate = parser.path() if parser.pos < len(symbol) else None
	if parser.pos != len(symbol):
		raise DemangleError(f"trailing data {symbol[parser.pos:]!r}")
	return Demangled(text=text, instantiating_crate=crate)


def demangle(symbol: str) -> str:
	"""Return the Rust-like rendering of `symbol` with all backrefs expanded."""
	return parse_symbol(symbol).text


__all__ = ["DemangleError", "Demangled", "parse_symbol", "demangle"]
