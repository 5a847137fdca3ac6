# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Base-62 integers as used by the v0 grammar (`<base-62-number>`).

The encoding is `_`-terminated and shifted by one so the most common value
(zero: first occurrence, no disambiguator, backref to offset 0) costs a
single byte:

  0  -> "_"
  1  -> "0_"
  62 -> "Z_"
  63 -> "10_"

Optional integers (`<disambiguator>` and friends) add a second shift on top:
0 encodes as nothing, 1 as `tag + "_"`, 2 as `tag + "0_"` and so on.
"""

from __future__ import annotations

BASE62_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
U64_LIMIT = 1 << 64

_DIGIT_VALUES = {ch: idx for idx, ch in enumerate(BASE62_DIGITS)}


def _check_u64(x: int) -> None:
	if isinstance(x, bool) or not isinstance(x, int):
		raise TypeError(f"expected an unsigned integer, got {type(x).__name__}")
	if x < 0 or x >= U64_LIMIT:
		raise ValueError(f"value {x} is outside the unsigned 64-bit range")


def to_base62(x: int) -> str:
	"""Return the raw base-62 digits of `x` (most significant first, no terminator)."""
	if x == 0:
		return "0"
	digits: list[str] = []
	while x > 0:
		x, rem = divmod(x, 62)
		digits.append(BASE62_DIGITS[rem])
	return "".join(reversed(digits))


def encode_integer_62(x: int) -> str:
	"""Encode `x` as a `_`-terminated base-62 number (`x - 1` in digits, 0 is bare `_`)."""
	_check_u64(x)
	if x == 0:
		return "_"
	return to_base62(x - 1) + "_"


def encode_opt_integer_62(tag: str, x: int) -> str:
	"""
	Encode an optional tagged integer.

	`x == 0` means "absent" and produces nothing; otherwise the tag is followed
	by `encode_integer_62(x - 1)`.
	"""
	_check_u64(x)
	if x == 0:
		return ""
	return tag + encode_integer_62(x - 1)


def encode_disambiguator(x: int) -> str:
	"""Encode a path disambiguator (`s` tag)."""
	return encode_opt_integer_62("s", x)


def parse_integer_62(text: str, pos: int = 0) -> tuple[int, int]:
	"""
	Parse a `_`-terminated base-62 number starting at `pos`.

	Returns `(value, next_pos)` where `next_pos` points just past the `_`.
	Raises ValueError on a missing terminator, a foreign digit, or overflow.
	"""
	if pos < len(text) and text[pos] == "_":
		return 0, pos + 1
	acc = 0
	idx = pos
	while True:
		if idx >= len(text):
			raise ValueError(f"unterminated base-62 number at offset {pos}")
		ch = text[idx]
		if ch == "_":
			break
		digit = _DIGIT_VALUES.get(ch)
		if digit is None:
			raise ValueError(f"invalid base-62 digit {ch!r} at offset {idx}")
		acc = acc * 62 + digit
		idx += 1
	value = acc + 1
	if value >= U64_LIMIT:
		raise ValueError(f"base-62 number at offset {pos} overflows 64 bits")
	return value, idx + 1


def decode_integer_62(text: str) -> int:
	"""Decode a complete `_`-terminated base-62 number (inverse of `encode_integer_62`)."""
	value, end = parse_integer_62(text, 0)
	if end != len(text):
		raise ValueError(f"trailing data after base-62 number: {text[end:]!r}")
	return value


__all__ = [
	"BASE62_DIGITS",
	"U64_LIMIT",
	"to_base62",
	"encode_integer_62",
	"encode_opt_integer_62",
	"encode_disambiguator",
	"parse_integer_62",
	"decode_integer_62",
]
