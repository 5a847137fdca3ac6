"""
v0mangle.frontend: ways of describing symbols other than building shapes by hand.

Modules:
  - type_expr: lark grammar for Rust-like type expressions -> TypeShape
  - describe: reflection-style scalar reports -> PrimitiveKind
  - manifest: JSON batch manifests -> per-item symbols or diagnostics
"""

__all__ = [
    "type_expr",
    "describe",
    "manifest",
]
