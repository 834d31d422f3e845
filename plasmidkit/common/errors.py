# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" Contains various error classes for use throughout plasmidkit """

from enum import Enum, unique


class PlasmidkitError(Exception):
    """ A general catch-all for errors within plasmidkit """
    pass


class PlasmidkitInputError(PlasmidkitError):
    """ An error for when input to plasmidkit as a whole is invalid or contains
        unsupported content.

        Not intended to replace TypeError/ValueError in functions not directly
        parsing or converting input files.
    """
    pass


@unique
class FormatErrorKind(Enum):
    """ The specific reasons a sequence file could not be decoded """
    INVALID_MAGIC = "invalid magic"
    DUPLICATE_PACKET = "duplicate packet"
    MISSING_SEQUENCE = "missing sequence"
    MALFORMED_XML = "malformed XML"
    MALFORMED_LOCATION = "malformed location"
    MALFORMED_PACKET = "malformed packet"


@unique
class ValidationErrorKind(Enum):
    """ The specific reasons a digest request was rejected """
    EMPTY_ENZYME_SELECTION = "empty enzyme selection"
    UNKNOWN_ENZYME = "unknown enzyme"


class FormatError(PlasmidkitInputError, ValueError):
    """ Raised when binary or text sequence input can't be decoded.

        Arguments:
            kind: the FormatErrorKind describing the failure
            message: details of the specific failure
    """
    def __init__(self, kind: FormatErrorKind, message: str = "") -> None:
        if not isinstance(kind, FormatErrorKind):
            raise TypeError(f"expected FormatErrorKind, not {type(kind)}")
        self.kind = kind
        super().__init__(f"{kind.value}: {message}" if message else kind.value)


class ValidationError(PlasmidkitError, ValueError):
    """ Raised when a simulation request is invalid for the given record.

        Arguments:
            kind: the ValidationErrorKind describing the failure
            message: details of the specific failure
    """
    def __init__(self, kind: ValidationErrorKind, message: str = "") -> None:
        if not isinstance(kind, ValidationErrorKind):
            raise TypeError(f"expected ValidationErrorKind, not {type(kind)}")
        self.kind = kind
        super().__init__(f"{kind.value}: {message}" if message else kind.value)
