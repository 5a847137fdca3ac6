# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Position-based backreference cache.

Every path, compound type, and const is remembered by the byte offset at
which its full form started. Emitting the same thing again writes
`B<base-62 offset>` instead, where the offset is relative to the end of the
`_R` prefix. Because the offset is recorded before the full form is
written, a hit always points strictly before the current write position.

The three key spaces are independent: a path key can never collide with a
type key even if the Python values happen to compare equal.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Hashable


class CacheSpace(Enum):
	PATHS = "paths"
	TYPES = "types"
	CONSTS = "consts"


class BackrefCache:
	"""Per-symbol map of structural key -> first-emission offset."""

	def __init__(self) -> None:
		self._entries: Dict[CacheSpace, Dict[Hashable, int]] = {space: {} for space in CacheSpace}

	def lookup(self, space: CacheSpace, key: Hashable) -> int | None:
		return self._entries[space].get(key)

	def lookup_or_record(self, space: CacheSpace, key: Hashable, offset: int) -> int | None:
		"""
		Return the recorded offset for `key` (a hit), or record `offset` and
		return None (a miss; the caller must now emit the full form at `offset`).
		"""
		entries = self._entries[space]
		hit = entries.get(key)
		if hit is not None:
			return hit
		entries[key] = offset
		return None

	def size(self, space: CacheSpace | None = None) -> int:
		if space is not None:
			return len(self._entries[space])
		return sum(len(v) for v in self._entries.values())

	def __contains__(self, item: tuple[CacheSpace, Hashable]) -> bool:
		space, key = item
		return key in self._entries[space]


__all__ = ["BackrefCache", "CacheSpace"]
