# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from v0mangle.core.diagnostics import Diagnostic
from v0mangle.core.errors import (
	IncompletePath,
	MalformedIdentifier,
	ManglingError,
	UnboundLifetime,
	UnsupportedShape,
)


def test_reason_codes_are_stable() -> None:
	assert ManglingError("x").reason_code == "mangling-error"
	assert MalformedIdentifier("x").reason_code == "malformed-identifier"
	assert UnsupportedShape("x").reason_code == "unsupported-shape"
	assert UnboundLifetime("x").reason_code == "unbound-lifetime"
	assert IncompletePath("x").reason_code == "incomplete-path"


def test_errors_share_one_base() -> None:
	for cls in (MalformedIdentifier, UnsupportedShape, UnboundLifetime, IncompletePath):
		assert issubclass(cls, ManglingError)


def test_error_formatting_and_dict() -> None:
	err = MalformedIdentifier("invalid byte 0x2d in identifier", subject="a-b")
	assert str(err) == "[malformed-identifier] invalid byte 0x2d in identifier subject='a-b'"
	assert err.to_dict() == {
		"reason_code": "malformed-identifier",
		"message": "invalid byte 0x2d in identifier",
		"subject": "a-b",
	}


def test_diagnostic_rendering() -> None:
	diag = Diagnostic(message="boom", code="incomplete-path", phase="build", subject="mycrate::inner")
	assert diag.format_human() == "mycrate::inner: error: boom"
	assert diag.to_dict()["phase"] == "build"
	assert Diagnostic(message="boom").format_human() == "error: boom"
