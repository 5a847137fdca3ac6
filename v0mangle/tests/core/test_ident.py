# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from v0mangle.core.errors import MalformedIdentifier
from v0mangle.core.ident import encode_ident, needs_punycode, punycode_ident


def test_ascii_identifiers_are_length_prefixed() -> None:
	assert encode_ident("foo") == "3foo"
	assert encode_ident("inner_function") == "14inner_function"
	assert encode_ident("") == "0"


def test_separator_when_payload_starts_with_digit_or_underscore() -> None:
	assert encode_ident("_foo") == "4__foo"
	assert encode_ident("0abc") == "4_0abc"
	assert encode_ident("a0") == "2a0"


@pytest.mark.parametrize(
	"ident, expected",
	[
		("gödel", "u8gdel_5qa"),
		("föö", "u6f_1gaa"),
		("café", "u7caf_dma"),
		("日本語", "u10wgv71a119e"),
		("Ελληνικά", "u12twa0c6aifdar"),
	],
)
def test_unicode_identifiers_use_punycode(ident: str, expected: str) -> None:
	assert encode_ident(ident) == expected


def test_punycode_delimiter_is_replaced_by_underscore() -> None:
	assert punycode_ident("gödel") == "gdel_5qa"
	# No basic code points: no delimiter at all.
	assert "_" not in punycode_ident("日本語")


def test_needs_punycode_classification() -> None:
	assert needs_punycode("plain_ascii_123") is False
	assert needs_punycode("é") is True


@pytest.mark.parametrize("ident", ["a-b", "a b", "foo::bar", "x.y"])
def test_ascii_outside_alphabet_is_malformed(ident: str) -> None:
	with pytest.raises(MalformedIdentifier, match="invalid byte"):
		encode_ident(ident)


def test_lone_surrogate_is_malformed() -> None:
	with pytest.raises(MalformedIdentifier, match="UTF-8") as excinfo:
		encode_ident("bad\ud800")
	assert excinfo.value.reason_code == "malformed-identifier"
