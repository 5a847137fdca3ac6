"""
v0mangle.core: leaf codecs and shared error/diagnostic types.

Modules:
  - base62: `_`-terminated base-62 integers and tagged optional integers
  - ident: length-prefixed identifiers with the Punycode fallback
  - errors: structured exception taxonomy
  - diagnostics: Diagnostic record for construction failures
  - crate_hash: crate disambiguator text helpers
"""

__all__ = [
    "base62",
    "ident",
    "errors",
    "diagnostics",
    "crate_hash",
]
