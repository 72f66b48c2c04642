# Copyright (c) 2023 Nordic Semiconductor ASA
# SPDX-License-Identifier: Apache-2.0

from typing import Any, Iterable, Optional

from typing_extensions import Self


class EdcError(Exception):
    """Base class for errors raised by the library."""

    ...


class EdcParseError(EdcError):
    """Raised when the input cannot be read as an EDC document."""

    ...


class EdcValueError(EdcError, ValueError):
    """Raised when an EDC attribute value cannot be decoded."""

    explanation: str = "invalid value"

    def __init__(self, value: str, source: Optional[str] = None) -> None:
        self.value = value
        self.source = source
        location = f" ({source})" if source else ""
        super().__init__(f"{self.explanation}: '{value}'{location}")

    def located(self, source: str) -> Self:
        """Return a copy of the error that also names where the value came from."""
        return self.__class__(self.value, source)


class MalformedNumber(EdcValueError):
    """Raised when a numeric literal matches none of the accepted syntaxes."""

    explanation = "malformed number"


class UnrecognizedPortalsSpec(EdcValueError):
    """Raised when a portals attribute is not one of the known literal forms."""

    explanation = "unrecognized portals specification"


class EdcDefinitionError(EdcError, ValueError):
    """Raised when unrecoverable errors occur due to an invalid definition in the EDC file."""

    def __init__(self, bindings: Iterable[Any], explanation: str):
        bindings_str = "\n".join(f"  * {b!r}" for b in bindings)
        super().__init__(f"Invalid EDC file element(s):\n{bindings_str}\n{explanation}")


class UnexpectedFieldEntry(EdcDefinitionError):
    """Raised when a mode block contains something other than fields and adjust points."""

    ...


class NameMismatch(EdcDefinitionError):
    """Raised when the name and canonical name of a register differ."""

    ...


class MissingPeripheralHint(EdcDefinitionError):
    """Raised when no peripheral label can be inferred for a register."""

    ...


class AddressOrderingViolation(EdcDefinitionError):
    """Raised when registers are not grouped by peripheral in ascending address order."""

    ...


class FieldOverflow(EdcDefinitionError):
    """Raised when the fields of a register do not fit in the register width."""

    ...


class EdcStructureError(EdcError, LookupError):
    """Raised when a required element or attribute is missing from the EDC document."""

    kind: str = "an element"

    def __init__(self, name: str, source: Any, explanation: str = "") -> None:
        formatted_explanation = "" if not explanation else f" ({explanation})"
        message = (
            f"{source!r} does not contain {self.kind} '{name}'{formatted_explanation}"
        )

        super().__init__(message)


class MissingElement(EdcStructureError):
    """Raised when a required child element is missing."""

    kind = "an element"


class MissingAttribute(EdcStructureError):
    """Raised when a required attribute is missing."""

    kind = "an attribute"
