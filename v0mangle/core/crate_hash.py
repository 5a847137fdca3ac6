# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Crate-root disambiguator helpers.

rustc prints a crate root as `C` + `encode_disambiguator(stable_crate_id)` +
ident, i.e. `Cs<digits>_<ident>`. `SymbolBuilder.with_hash` takes the
`<digits>` text directly; these helpers derive it from a numeric id.

`stable_crate_id` is a deterministic stand-in for rustc's StableCrateId:
rustc hashes the crate name and `-C metadata` values with SipHasher128,
which is not reproduced here, so ids computed by this module only match
symbols produced by this package.
"""

from __future__ import annotations

import hashlib
from typing import Iterable

from v0mangle.core.base62 import BASE62_DIGITS, encode_disambiguator


def crate_hash_from_stable_id(stable_id: int) -> str:
	"""
	Return the hash text for `stable_id` such that `"s" + text + "_"` equals
	`encode_disambiguator(stable_id)`.
	"""
	if stable_id < 2:
		raise ValueError("stable crate ids below 2 have no hash text (0 is absent, 1 is a bare 's_')")
	encoded = encode_disambiguator(stable_id)
	return encoded[1:-1]


def stable_id_from_crate_hash(text: str) -> int:
	"""Inverse of `crate_hash_from_stable_id`."""
	if not is_crate_hash(text):
		raise ValueError(f"crate hash must be non-empty base-62 text: {text!r}")
	acc = 0
	for ch in text:
		acc = acc * 62 + BASE62_DIGITS.index(ch)
	return acc + 2


def is_crate_hash(text: str) -> bool:
	return bool(text) and all(ch in BASE62_DIGITS for ch in text)


def stable_crate_id(crate_name: str, metadata: Iterable[str] = ()) -> int:
	"""Derive a deterministic 64-bit crate id from the crate name and metadata strings."""
	h = hashlib.sha256()
	h.update(crate_name.encode("utf-8"))
	for item in sorted(metadata):
		h.update(b"\0")
		h.update(item.encode("utf-8"))
	value = int.from_bytes(h.digest()[:8], "little")
	# Keep clear of the 0/1 values that have no `s<digits>_` form.
	return max(value, 2)


def crate_hash_for(crate_name: str, metadata: Iterable[str] = ()) -> str:
	"""Convenience: hash text for `stable_crate_id(crate_name, metadata)`."""
	return crate_hash_from_stable_id(stable_crate_id(crate_name, metadata))


__all__ = [
	"crate_hash_from_stable_id",
	"stable_id_from_crate_hash",
	"is_crate_hash",
	"stable_crate_id",
	"crate_hash_for",
]
