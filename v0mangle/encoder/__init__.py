"""
v0mangle.encoder: the v0 encoding engine.

Modules:
  - state: EncoderState (output buffer, backref cache, binder stack)
  - backref: BackrefCache and its three key spaces
  - paths: crate roots, nested paths, impl paths
  - shapes: TypeShape / GenericArgument closed unions
  - types: type encoder
  - generics: generic argument lists and lifetime binders
  - symbol: SymbolConfig / SymbolBuilder orchestration
"""

__all__ = [
    "state",
    "backref",
    "paths",
    "shapes",
    "types",
    "generics",
    "symbol",
]
