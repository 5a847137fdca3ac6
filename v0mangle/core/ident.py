# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Identifier encoding (`<identifier>` / `<undisambiguated-identifier>`).

  ident      = ["u"] <decimal-length> ["_"] <bytes>

ASCII identifiers (`[_a-zA-Z0-9]*`) are emitted verbatim after their length.
A `_` separator follows the length whenever the payload itself starts with
a digit or `_`, so the length field always ends where the payload begins.

Identifiers containing non-ASCII code points are Punycode-encoded (RFC 3492)
first. Punycode's `-` delimiter is not a legal identifier byte, so it is
replaced by `_`; decoders split on the *last* `_`, which is unambiguous
because the encoded deltas only ever use `[a-z0-9]`.
"""

from __future__ import annotations

from v0mangle.core.errors import MalformedIdentifier

_ASCII_IDENT_BYTES = frozenset(b"_abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789")


def needs_punycode(ident: str) -> bool:
	"""
	Classify `ident`: False for the ASCII fast path, True for Punycode.

	Raises MalformedIdentifier for ASCII bytes outside `[_a-zA-Z0-9]` and
	for text that is not valid UTF-8 (lone surrogates).
	"""
	try:
		raw = ident.encode("utf-8")
	except UnicodeEncodeError as exc:
		raise MalformedIdentifier(f"identifier is not valid UTF-8: {exc.reason}", subject=ident) from exc
	use_punycode = False
	for b in raw:
		if b >= 0x80:
			use_punycode = True
		elif b not in _ASCII_IDENT_BYTES:
			raise MalformedIdentifier(f"invalid byte 0x{b:02x} in identifier", subject=ident)
	return use_punycode


def punycode_ident(ident: str) -> str:
	"""Return the Punycode form of `ident` with its delimiter replaced by `_`."""
	try:
		encoded = ident.encode("punycode").decode("ascii")
	except (UnicodeError, ValueError) as exc:
		raise MalformedIdentifier(f"punycode encoding failed: {exc}", subject=ident) from exc
	delim = encoded.rfind("-")
	if delim >= 0:
		encoded = encoded[:delim] + "_" + encoded[delim + 1 :]
	return encoded


def encode_ident(ident: str) -> str:
	"""Encode `ident` as a length-prefixed v0 identifier."""
	prefix = ""
	if needs_punycode(ident):
		prefix = "u"
		ident = punycode_ident(ident)
	first = ident[:1]
	sep = "_" if first and first in "_0123456789" else ""
	return f"{prefix}{len(ident)}{sep}{ident}"


__all__ = ["encode_ident", "needs_punycode", "punycode_ident"]
