# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Command-line front end.

  python -m v0mangle mangle --crate mycrate --module inner --function foo --generic u32
  python -m v0mangle batch exports.json --json
  python -m v0mangle base62 1000
  python -m v0mangle ident café

Every subcommand exits 0 on success and 1 when any diagnostic was produced.
With --json, results and diagnostics are printed as one JSON object on stdout;
otherwise symbols go to stdout and diagnostics to stderr.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

from v0mangle.core.base62 import encode_integer_62
from v0mangle.core.diagnostics import Diagnostic
from v0mangle.core.errors import ManglingError
from v0mangle.core.ident import encode_ident
from v0mangle.encoder.symbol import SymbolBuilder
from v0mangle.frontend.manifest import ManifestError, load_manifest, mangle_manifest
from v0mangle.frontend.type_expr import TypeExprError, parse_generic_args


def _emit(args: argparse.Namespace, diagnostics: list[Diagnostic], **payload: Any) -> int:
	exit_code = 1 if diagnostics else 0
	if args.json:
		print(json.dumps({"exit_code": exit_code, **payload, "diagnostics": [d.to_dict() for d in diagnostics]}))
	else:
		for d in diagnostics:
			print(d.format_human(), file=sys.stderr)
	return exit_code


def _error_diag(exc: ManglingError, phase: str) -> Diagnostic:
	return Diagnostic(message=exc.message, code=exc.reason_code, phase=phase, subject=exc.subject)


def _cmd_mangle(args: argparse.Namespace) -> int:
	builder = SymbolBuilder(args.crate)
	if args.hash is not None:
		builder.with_hash(args.hash)
	builder.with_crate_disambiguator(args.crate_disambiguator)
	builder.modules(args.modules or [])
	if args.function is not None:
		builder.function(args.function)
	elif args.static is not None:
		builder.static(args.static)
	elif args.const is not None:
		builder.const(args.const)
	elif args.type is not None:
		builder.type(args.type)
	elif args.method is not None:
		builder.method(args.method[0], args.method[1])
	try:
		builder.with_generics(parse_generic_args(args.generics or [], args.lifetimes or []))
	except TypeExprError as exc:
		diag = Diagnostic(message=str(exc), code="bad-type-expression", phase="parse", subject=exc.source)
		return _emit(args, [diag], symbol=None)
	builder.with_instantiating_crate(args.instantiating_crate)
	try:
		result = builder.build()
	except ManglingError as exc:
		return _emit(args, [_error_diag(exc, "encode")], symbol=None)
	if result.ok and not args.json:
		print(result.symbol)
	return _emit(args, result.diagnostics, symbol=result.symbol)


def _cmd_batch(args: argparse.Namespace) -> int:
	try:
		manifest = load_manifest(args.manifest)
	except ManifestError as exc:
		diag = Diagnostic(message=str(exc), code="bad-manifest", phase="manifest", subject=str(args.manifest))
		return _emit(args, [diag], entries=[])
	entries = mangle_manifest(manifest)
	diagnostics = [d for e in entries for d in e.diagnostics]
	if not args.json:
		for entry in entries:
			if entry.ok:
				print(entry.symbol)
	return _emit(args, diagnostics, entries=[e.to_dict() for e in entries])


def _cmd_base62(args: argparse.Namespace) -> int:
	try:
		encoded = encode_integer_62(args.value)
	except ValueError as exc:
		diag = Diagnostic(message=str(exc), code="out-of-range", phase="cli", subject=str(args.value))
		return _emit(args, [diag], encoded=None)
	if not args.json:
		print(encoded)
	return _emit(args, [], encoded=encoded)


def _cmd_ident(args: argparse.Namespace) -> int:
	try:
		encoded = encode_ident(args.text)
	except ManglingError as exc:
		return _emit(args, [_error_diag(exc, "encode")], encoded=None)
	if not args.json:
		print(encoded)
	return _emit(args, [], encoded=encoded)


def _non_negative_int(text: str) -> int:
	try:
		value = int(text)
	except ValueError:
		raise argparse.ArgumentTypeError(f"invalid integer: {text!r}") from None
	if value < 0:
		raise argparse.ArgumentTypeError(f"must be non-negative: {value}")
	return value


def _build_parser() -> argparse.ArgumentParser:
	common = argparse.ArgumentParser(add_help=False)
	common.add_argument("--json", action="store_true", help="Emit results and diagnostics as one JSON object")
	common.add_argument("-v", "--verbose", action="store_true", help="Log encoder decisions (backref hits) at DEBUG level")

	parser = argparse.ArgumentParser(prog="v0mangle", description="RFC 2603 (v0) Rust symbol-name encoder")
	sub = parser.add_subparsers(dest="command", required=True)

	mangle_p = sub.add_parser("mangle", parents=[common], help="Encode one symbol")
	mangle_p.add_argument("--crate", required=True, help="Crate name")
	mangle_p.add_argument("--hash", help="Crate hash text (base-62), printed as Cs<hash>_")
	mangle_p.add_argument("--crate-disambiguator", type=_non_negative_int, default=0, help="Numeric crate disambiguator (ignored with --hash)")
	mangle_p.add_argument(
		"--module",
		dest="modules",
		action="append",
		help="Enclosing module, outermost first (repeatable)",
	)
	item = mangle_p.add_mutually_exclusive_group(required=True)
	item.add_argument("--function", help="Function name")
	item.add_argument("--static", help="Static name")
	item.add_argument("--const", help="Const item name")
	item.add_argument("--type", help="Type name")
	item.add_argument("--method", nargs=2, metavar=("TYPE", "NAME"), help="Inherent method NAME of TYPE")
	mangle_p.add_argument(
		"--generic",
		dest="generics",
		action="append",
		help="Generic argument: a type expression, a lifetime, or a usize const (repeatable)",
	)
	mangle_p.add_argument(
		"--lifetime",
		dest="lifetimes",
		action="append",
		help="Declare a named lifetime usable in --generic, in binder order (repeatable)",
	)
	mangle_p.add_argument("--instantiating-crate", action="store_true", help="Append the instantiating-crate suffix")
	mangle_p.set_defaults(func=_cmd_mangle)

	batch_p = sub.add_parser("batch", parents=[common], help="Encode every item of a JSON manifest")
	batch_p.add_argument("manifest", help="Path to the manifest JSON file")
	batch_p.set_defaults(func=_cmd_batch)

	base62_p = sub.add_parser("base62", parents=[common], help="Encode an integer as a v0 base-62 number")
	base62_p.add_argument("value", type=int)
	base62_p.set_defaults(func=_cmd_base62)

	ident_p = sub.add_parser("ident", parents=[common], help="Encode an identifier")
	ident_p.add_argument("text")
	ident_p.set_defaults(func=_cmd_ident)
	return parser


def main(argv: list[str] | None = None) -> int:
	"""
	Parse `argv` and run one subcommand.

	Returns the exit code instead of exiting so tests can call it directly.
	"""
	args = _build_parser().parse_args(argv)
	if args.verbose:
		logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
	return args.func(args)


if __name__ == "__main__":
	sys.exit(main())
