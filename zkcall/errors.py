# zkcall/errors.py
"""
Error taxonomy shared by every zkcall component.

- DecodeError:          a token or proof/public-signal structure could not be
                        decoded (bad digits, wrong arity). Always raised before
                        the verification endpoint is invoked.
- BoundaryError:        the proving backend or the verification endpoint was
                        unreachable, reverted, or answered with garbage.
- VerificationFailure:  only raised by `verify_or_raise`; a plain run reports
                        a rejected proof as `Verdict(ok=False)`.
"""

from __future__ import annotations


class ZKCallError(RuntimeError):
    """Base class for zkcall errors."""


class DecodeError(ZKCallError, ValueError):
    """Malformed calldata token or proof structure."""


class BoundaryError(ZKCallError):
    """An external collaborator failed or returned a malformed response."""


class VerificationFailure(ZKCallError):
    """The endpoint checked the arguments and rejected them."""


__all__ = ["ZKCallError", "DecodeError", "BoundaryError", "VerificationFailure"]
