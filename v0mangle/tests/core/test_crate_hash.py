# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from v0mangle.core.base62 import encode_disambiguator
from v0mangle.core.crate_hash import (
	crate_hash_for,
	crate_hash_from_stable_id,
	is_crate_hash,
	stable_crate_id,
	stable_id_from_crate_hash,
)


def test_hash_text_matches_disambiguator_encoding() -> None:
	assert crate_hash_from_stable_id(2) == "0"
	assert crate_hash_from_stable_id(63) == "Z"
	assert crate_hash_from_stable_id(64) == "10"
	for stable_id in (2, 99, 12345678901234):
		assert "s" + crate_hash_from_stable_id(stable_id) + "_" == encode_disambiguator(stable_id)


def test_known_crate_hash_round_trips() -> None:
	stable_id = stable_id_from_crate_hash("aRN1VPjcjfp")
	assert crate_hash_from_stable_id(stable_id) == "aRN1VPjcjfp"


def test_small_ids_have_no_hash_text() -> None:
	with pytest.raises(ValueError):
		crate_hash_from_stable_id(1)


def test_is_crate_hash() -> None:
	assert is_crate_hash("5GYaaS9NRMV")
	assert not is_crate_hash("")
	assert not is_crate_hash("ab-c")
	with pytest.raises(ValueError):
		stable_id_from_crate_hash("ab_c")


def test_stable_crate_id_is_deterministic() -> None:
	first = stable_crate_id("mycrate", ["a", "b"])
	assert first == stable_crate_id("mycrate", ["b", "a"])
	assert first != stable_crate_id("othercrate", ["a", "b"])
	assert 2 <= first < 1 << 64
	assert is_crate_hash(crate_hash_for("mycrate", ["a", "b"]))
