# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import json
from pathlib import Path

import pytest

from v0mangle.frontend.manifest import ManifestError, load_manifest, mangle_manifest, parse_manifest


def _write(tmp_path: Path, obj: object) -> Path:
	path = tmp_path / "exports.json"
	path.write_text(json.dumps(obj), encoding="utf-8")
	return path


def test_manifest_round_trip(tmp_path: Path) -> None:
	path = _write(
		tmp_path,
		{
			"crate": "test_symbols",
			"hash": "aRN1VPjcjfp",
			"items": [
				{"kind": "function", "path": "test_symbols::inner", "name": "inner_function"},
				{"kind": "static", "name": "STATIC_VALUE"},
				{"kind": "method", "path": "test_symbols::inner", "type": "InnerStruct", "name": "inner_method"},
				{
					"kind": "function",
					"name": "generic_function",
					"generics": ["i32"],
					"instantiating_crate": True,
				},
			],
		},
	)
	entries = mangle_manifest(load_manifest(path))
	assert [e.ok for e in entries] == [True, True, True, True]
	assert [e.symbol for e in entries] == [
		"_RNvNtCsaRN1VPjcjfp_12test_symbols5inner14inner_function",
		"_RNvCsaRN1VPjcjfp_12test_symbols12STATIC_VALUE",
		"_RNvMNtCsaRN1VPjcjfp_12test_symbols5innerNtB2_11InnerStruct12inner_method",
		"_RINvCsaRN1VPjcjfp_12test_symbols16generic_functionlEB2_",
	]


def test_lifetimes_and_consts_in_generics() -> None:
	manifest = parse_manifest(
		{
			"crate": "mycrate",
			"items": [
				{"kind": "function", "name": "foo", "generics": ["&'a u32", "'a"], "lifetimes": ["a"]},
				{"kind": "function", "name": "foo", "generics": ["5", "5"]},
			],
		}
	)
	entries = mangle_manifest(manifest)
	assert entries[0].symbol == "_RINvC7mycrate3fooRL0_mL0_E"
	assert entries[1].symbol == "_RINvC7mycrate3fooKj4_KBg_E"


def test_item_failures_do_not_stop_the_batch() -> None:
	manifest = parse_manifest(
		{
			"crate": "mycrate",
			"items": [
				{"kind": "closure", "name": "x"},
				{"kind": "function", "name": "foo", "generics": ["[u32"]},
				{"kind": "function", "name": "bad-name"},
				{"kind": "function", "path": "othercrate::m", "name": "foo"},
				{"kind": "method", "name": "new"},
				{"kind": "function", "name": "foo", "generics": ["Vec<u8>"]},
				{"kind": "function", "name": "ok"},
			],
		}
	)
	entries = mangle_manifest(manifest)
	codes = [[d.code for d in e.diagnostics] for e in entries]
	assert codes == [
		["unknown-item-kind"],
		["bad-type-expression"],
		["malformed-identifier"],
		["foreign-path"],
		["missing-self-type"],
		["unsupported-shape"],
		[],
	]
	assert entries[2].diagnostics[0].phase == "encode"
	assert entries[0].diagnostics[0].phase == "manifest"
	assert entries[2].diagnostics[0].subject == "items[2] mycrate::bad-name"
	assert entries[-1].symbol == "_RNvC7mycrate2ok"
	assert entries[-1].to_dict()["symbol"] == "_RNvC7mycrate2ok"


def test_manifest_level_default_for_instantiating_crate() -> None:
	manifest = parse_manifest(
		{
			"crate": "mycrate",
			"instantiating_crate": True,
			"items": [
				{"kind": "function", "name": "foo"},
				{"kind": "function", "name": "bar", "instantiating_crate": False},
			],
		}
	)
	entries = mangle_manifest(manifest)
	assert entries[0].symbol == "_RNvC7mycrate3fooB1_"
	assert entries[1].symbol == "_RNvC7mycrate3bar"


@pytest.mark.parametrize(
	"obj, message",
	[
		([], "JSON object"),
		({"items": []}, "'crate'"),
		({"crate": "c"}, "'items'"),
		({"crate": "c", "items": [1]}, "expected an object"),
		({"crate": "c", "items": [{"kind": "function"}]}, "'kind' and 'name'"),
		({"crate": "c", "items": [{"kind": "function", "name": "f", "generics": "u32"}]}, "'generics'"),
		({"crate": "c", "items": [{"kind": "function", "name": "f", "disambiguator": -1}]}, "'disambiguator'"),
	],
)
def test_malformed_manifests(obj: object, message: str) -> None:
	with pytest.raises(ManifestError, match=message):
		parse_manifest(obj)


def test_unreadable_manifests(tmp_path: Path) -> None:
	with pytest.raises(ManifestError, match="cannot read"):
		load_manifest(tmp_path / "missing.json")
	bad = tmp_path / "bad.json"
	bad.write_text("{not json", encoding="utf-8")
	with pytest.raises(ManifestError, match="invalid JSON"):
		load_manifest(bad)


def test_out_of_range_disambiguator_fails_only_its_item() -> None:
	manifest = parse_manifest(
		{
			"crate": "mycrate",
			"items": [
				{"kind": "function", "name": "ok"},
				{"kind": "function", "name": "bad", "disambiguator": 1 << 64},
			],
		}
	)
	entries = mangle_manifest(manifest)
	assert entries[0].symbol == "_RNvC7mycrate2ok"
	assert entries[1].symbol is None
	assert [d.code for d in entries[1].diagnostics] == ["bad-disambiguator"]
	assert entries[1].diagnostics[0].subject == "items[1] mycrate::bad"
