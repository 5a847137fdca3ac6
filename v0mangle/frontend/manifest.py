# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Batch manifests: mangle every exported item of a crate in one pass.

A manifest is a JSON object:

  {
    "crate": "mycrate",
    "hash": "aRN1VPjcjfp",            // optional crate hash text
    "instantiating_crate": false,     // optional default for every item
    "items": [
      {"kind": "function", "name": "foo"},
      {"kind": "function", "path": "mycrate::inner", "name": "bar",
       "generics": ["&'a u32", "'a"], "lifetimes": ["a"]},
      {"kind": "method", "path": "mycrate", "type": "Foo", "name": "new"}
    ]
  }

`path` is the enclosing module path spelled from the crate name (absent means
the crate root). `kind` is one of function/static/const/type/method.

JSON shape errors raise ManifestError and reject the whole manifest. That
covers the top-level object and any item with a field of the wrong JSON type
(a non-string name, a negative disambiguator, `generics` that is not a list
of strings). Once the shape is valid, problems with a single item become
diagnostics on that item's entry so the rest of the batch still runs. These
include an unknown kind, a bad type expression, an identifier the encoder
rejects, and an out-of-range disambiguator.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from v0mangle.core.diagnostics import Diagnostic
from v0mangle.core.errors import ManglingError
from v0mangle.encoder.symbol import ItemKind, SymbolBuilder
from v0mangle.frontend.type_expr import TypeExprError, parse_generic_args

logger = logging.getLogger(__name__)

ITEM_KINDS = ("function", "static", "const", "type", "method")


class ManifestError(ValueError):
	"""The manifest file or its top-level object is unusable."""


@dataclass
class ManifestItem:
	kind: str
	name: str
	path: list[str] = field(default_factory=list)
	type_name: str | None = None
	generics: list[str] = field(default_factory=list)
	lifetimes: list[str] = field(default_factory=list)
	disambiguator: int = 0
	instantiating_crate: bool | None = None


@dataclass
class Manifest:
	crate: str
	hash: str | None = None
	instantiating_crate: bool = False
	items: list[ManifestItem] = field(default_factory=list)


@dataclass
class ManifestEntry:
	"""Outcome for one manifest item: a symbol, or the diagnostics explaining why not."""

	index: int
	item: ManifestItem
	symbol: str | None = None
	diagnostics: list[Diagnostic] = field(default_factory=list)

	@property
	def ok(self) -> bool:
		return self.symbol is not None and not self.diagnostics

	def to_dict(self) -> dict[str, Any]:
		return {
			"index": self.index,
			"kind": self.item.kind,
			"path": "::".join(self.item.path),
			"name": self.item.name,
			"symbol": self.symbol,
			"diagnostics": [d.to_dict() for d in self.diagnostics],
		}


def _str_list(obj: Mapping[str, Any], key: str, where: str) -> list[str]:
	value = obj.get(key, [])
	if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
		raise ManifestError(f"{where}: '{key}' must be a list of strings")
	return list(value)


def _parse_item(obj: Any, index: int) -> ManifestItem:
	where = f"items[{index}]"
	if not isinstance(obj, dict):
		raise ManifestError(f"{where}: expected an object")
	kind = obj.get("kind")
	name = obj.get("name")
	if not isinstance(kind, str) or not isinstance(name, str):
		raise ManifestError(f"{where}: 'kind' and 'name' must be strings")
	path_text = obj.get("path", "")
	if not isinstance(path_text, str):
		raise ManifestError(f"{where}: 'path' must be a string like 'crate::module'")
	type_name = obj.get("type")
	if type_name is not None and not isinstance(type_name, str):
		raise ManifestError(f"{where}: 'type' must be a string")
	disambiguator = obj.get("disambiguator", 0)
	if isinstance(disambiguator, bool) or not isinstance(disambiguator, int) or disambiguator < 0:
		raise ManifestError(f"{where}: 'disambiguator' must be a non-negative integer")
	inst = obj.get("instantiating_crate")
	if inst is not None and not isinstance(inst, bool):
		raise ManifestError(f"{where}: 'instantiating_crate' must be a boolean")
	return ManifestItem(
		kind=kind,
		name=name,
		path=path_text.split("::") if path_text else [],
		type_name=type_name,
		generics=_str_list(obj, "generics", where),
		lifetimes=_str_list(obj, "lifetimes", where),
		disambiguator=disambiguator,
		instantiating_crate=inst,
	)


def parse_manifest(obj: Any) -> Manifest:
	"""Validate a decoded JSON object and build a Manifest."""
	if not isinstance(obj, dict):
		raise ManifestError("manifest must be a JSON object")
	crate = obj.get("crate")
	if not isinstance(crate, str):
		raise ManifestError("manifest: 'crate' must be a string")
	crate_hash = obj.get("hash")
	if crate_hash is not None and not isinstance(crate_hash, str):
		raise ManifestError("manifest: 'hash' must be a string")
	inst = obj.get("instantiating_crate", False)
	if not isinstance(inst, bool):
		raise ManifestError("manifest: 'instantiating_crate' must be a boolean")
	items = obj.get("items")
	if not isinstance(items, list):
		raise ManifestError("manifest: 'items' must be a list")
	return Manifest(
		crate=crate,
		hash=crate_hash,
		instantiating_crate=inst,
		items=[_parse_item(item, idx) for idx, item in enumerate(items)],
	)


def load_manifest(path: Path | str) -> Manifest:
	path = Path(path)
	try:
		text = path.read_text(encoding="utf-8")
	except OSError as exc:
		raise ManifestError(f"cannot read manifest {path}: {exc.strerror or exc}") from exc
	try:
		obj = json.loads(text)
	except json.JSONDecodeError as exc:
		raise ManifestError(f"{path}: invalid JSON at line {exc.lineno}, column {exc.colno}: {exc.msg}") from exc
	return parse_manifest(obj)


def _item_diag(message: str, code: str, phase: str, subject: str) -> Diagnostic:
	return Diagnostic(message=message, code=code, phase=phase, subject=subject)


def _builder_for(manifest: Manifest, item: ManifestItem, subject: str) -> SymbolBuilder | Diagnostic:
	if item.kind not in ITEM_KINDS:
		return _item_diag(
			f"unknown item kind {item.kind!r} (expected one of {', '.join(ITEM_KINDS)})",
			"unknown-item-kind",
			"manifest",
			subject,
		)
	if item.path and item.path[0] != manifest.crate:
		return _item_diag(
			f"path {'::'.join(item.path)!r} does not start with crate {manifest.crate!r}",
			"foreign-path",
			"manifest",
			subject,
		)
	builder = SymbolBuilder(manifest.crate)
	if manifest.hash is not None:
		builder.with_hash(manifest.hash)
	builder.modules(item.path[1:])
	if item.kind == "method":
		if not item.type_name:
			return _item_diag("method items need a 'type'", "missing-self-type", "manifest", subject)
		builder.method(item.type_name, item.name, impl_disambiguator=item.disambiguator)
	else:
		builder.item(ItemKind(item.kind), item.name, item.disambiguator)
	try:
		builder.with_generics(parse_generic_args(item.generics, item.lifetimes))
	except TypeExprError as exc:
		return _item_diag(str(exc), "bad-type-expression", "manifest", subject)
	inst = manifest.instantiating_crate if item.instantiating_crate is None else item.instantiating_crate
	builder.with_instantiating_crate(inst)
	return builder


def mangle_manifest(manifest: Manifest) -> list[ManifestEntry]:
	"""Mangle every item; one entry per item, in manifest order."""
	entries: list[ManifestEntry] = []
	for index, item in enumerate(manifest.items):
		subject = f"items[{index}] {'::'.join([*(item.path or [manifest.crate]), item.name])}"
		entry = ManifestEntry(index=index, item=item)
		built = _builder_for(manifest, item, subject)
		if isinstance(built, Diagnostic):
			entry.diagnostics.append(built)
			entries.append(entry)
			continue
		try:
			result = built.build()
		except ManglingError as exc:
			entry.diagnostics.append(_item_diag(exc.message, exc.reason_code, "encode", subject))
		else:
			if result.ok:
				entry.symbol = result.symbol
			else:
				for diag in result.diagnostics:
					diag.subject = subject
				entry.diagnostics.extend(result.diagnostics)
		entries.append(entry)
	failed = sum(1 for e in entries if not e.ok)
	logger.debug("manifest for %s: %d item(s), %d failed", manifest.crate, len(entries), failed)
	return entries


__all__ = [
	"ITEM_KINDS",
	"ManifestError",
	"ManifestItem",
	"Manifest",
	"ManifestEntry",
	"parse_manifest",
	"load_manifest",
	"mangle_manifest",
]
