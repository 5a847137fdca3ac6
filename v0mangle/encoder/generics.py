# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Generic argument lists.

  <path> = "I" <path> {<generic-arg>} "E"
  <generic-arg> = <lifetime> | <type> | "K" <const>

Lifetime arguments are resolved against the binder stack: the argument list
opens one binder sized to the bound lifetimes it mentions, so `'a` in
`foo::<'a, 'b>` becomes `L1_` and `'b` becomes `L0_` (innermost first).
"""

from __future__ import annotations

from typing import Callable, Hashable, Iterable, Sequence

from v0mangle.core.errors import UnsupportedShape
from v0mangle.encoder.backref import CacheSpace
from v0mangle.encoder.shapes import (
	Array,
	ConstArg,
	GenericArgument,
	Lifetime,
	LifetimeArg,
	RawPointer,
	Reference,
	Slice,
	Tuple,
	TypeArg,
	TypeShape,
)
from v0mangle.encoder.state import EncoderState
from v0mangle.encoder.types import print_const_usize, print_lifetime, print_type


def _shape_lifetimes(shape: TypeShape) -> Iterable[Lifetime]:
	if isinstance(shape, Reference):
		if shape.lifetime is not None:
			yield shape.lifetime
		yield from _shape_lifetimes(shape.inner)
	elif isinstance(shape, (RawPointer, Array, Slice)):
		yield from _shape_lifetimes(shape.inner)
	elif isinstance(shape, Tuple):
		for elem in shape.elements:
			yield from _shape_lifetimes(elem)


def arg_lifetimes(args: Sequence[GenericArgument]) -> Iterable[Lifetime]:
	"""Every lifetime mentioned by `args`, in print order."""
	for arg in args:
		if isinstance(arg, LifetimeArg):
			yield arg.lifetime
		elif isinstance(arg, TypeArg):
			yield from _shape_lifetimes(arg.shape)


def count_bound_lifetimes(args: Sequence[GenericArgument]) -> int:
	"""Size of the binder an argument list needs: highest innermost-bound var + 1."""
	count = 0
	for lt in arg_lifetimes(args):
		if lt.debruijn == 0:
			count = max(count, lt.var + 1)
	return count


def print_generic_arg(state: EncoderState, arg: GenericArgument) -> None:
	if isinstance(arg, TypeArg):
		print_type(state, arg.shape)
	elif isinstance(arg, LifetimeArg):
		print_lifetime(state, arg.lifetime)
	elif isinstance(arg, ConstArg):
		print_const_usize(state, arg.value)
	else:
		raise UnsupportedShape(
			f"cannot encode generic argument of type {type(arg).__name__}",
			subject=repr(arg),
		)


def print_generic_args(
	state: EncoderState,
	args: Sequence[GenericArgument],
	*,
	bound_lifetimes: int | None = None,
) -> None:
	"""Print each argument inside a binder scope (no `I`/`E` brackets)."""
	if bound_lifetimes is None:
		bound_lifetimes = count_bound_lifetimes(args)
	with state.in_binder(bound_lifetimes):
		for arg in args:
			print_generic_arg(state, arg)


def print_instantiation(
	state: EncoderState,
	key: Hashable,
	print_prefix: Callable[[EncoderState], None],
	args: Sequence[GenericArgument],
	*,
	bound_lifetimes: int | None = None,
) -> None:
	"""
	Print `I` + prefix + args + `E`, or a backref when this exact
	(path, args) pair was printed before.
	"""
	if state.try_backref(CacheSpace.PATHS, (key, tuple(args))):
		return
	state.push("I")
	print_prefix(state)
	print_generic_args(state, args, bound_lifetimes=bound_lifetimes)
	state.push("E")


__all__ = [
	"arg_lifetimes",
	"count_bound_lifetimes",
	"print_generic_arg",
	"print_generic_args",
	"print_instantiation",
]
