class FMLError(Exception):
    """
    User-facing, structured error.

    Every failure while loading or lowering a manifest is raised as
    one of these. They are safe to show directly to manifest authors
    without leaking stack traces.
    """

    code = "FML_ERROR"

    def __init__(self, message: str, code: str | None = None):
        if code is not None:
            self.code = code
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


# ---------------------------------------------------------------------------
# Document errors
# ---------------------------------------------------------------------------

class ManifestIOError(FMLError):
    """The manifest document could not be read."""

    code = "IO_ERROR"


class DeserializationError(FMLError):
    """The document does not have the expected key/value shape."""

    code = "DESERIALIZATION_ERROR"


# ---------------------------------------------------------------------------
# Type expression errors
# ---------------------------------------------------------------------------

class TypeParsingError(FMLError):
    """A type expression names a constructor that is not recognized."""

    code = "TYPE_PARSING_ERROR"


class MalformedTypeExpression(TypeParsingError):
    """A generic constructor is missing its argument, or the brackets do not line up."""

    code = "MALFORMED_TYPE_EXPRESSION"


class UnsupportedMapKey(TypeParsingError):
    """A map key is neither String nor an Enum<...>."""

    code = "UNSUPPORTED_MAP_KEY"


# ---------------------------------------------------------------------------
# Lowering errors
# ---------------------------------------------------------------------------

class UnknownUserType(FMLError):
    """A type name matches neither a built-in constructor nor a declared enum/object."""

    code = "UNKNOWN_USER_TYPE"
