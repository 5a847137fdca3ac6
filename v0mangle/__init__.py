# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
v0mangle: RFC 2603 ("v0") Rust symbol-name encoder.

Packages:
  core: base-62 and identifier codecs, errors, diagnostics, crate hashes
  encoder: encoder state, backref cache, path/type/generic encoders, SymbolBuilder
  frontend: type-expression parser, shape description adapter, batch manifests

The CLI entrypoint is `v0mangle.cli:main` (`python -m v0mangle`).
"""

from v0mangle.encoder.symbol import BuildResult, SymbolBuilder, SymbolConfig, mangle

__all__ = ["BuildResult", "SymbolBuilder", "SymbolConfig", "mangle"]
