from . import etc

# Re-Exports
# ============================================================================
#
# `defarg.etc.err` holds the general error stuff that `defarg.etc` modules can
# raise without importing the rest of the package. Re-exported here so there
# is one place to import errors from.
#
ArgTypeError = etc.err.ArgTypeError


class DefargError(Exception):
    pass


class AbsentValueError(DefargError, LookupError):
    """Raised by `defarg.optional.OptionalValue.unwrap` when there is nothing to
    unwrap: the value is `defarg.optional.Absent`.

    Everything else in `defarg.optional` is total. Prefer `value_or` or `fold`
    unless you have _already_ branched on `is_present`.
    """

    def __init__(
        self,
        message: str = "no value present; the argument was left at its default",
    ):
        super().__init__(message)
