#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the web2md library.

This module defines the exception classes raised inside the conversion
engine and its outer surfaces. The public ``convert`` entry point never lets
them escape; it returns them inside a ``ConversionResult`` instead.

Exception Hierarchy
-------------------
- Web2MdError (base exception)

  - StructuralError (recursion limit exceeded, malformed tree)

  - RuleError (a conversion rule raised or returned a non-string)

  - ValidationError (parameter/option validation)
    - OptionValidationError (invalid ConversionOptions combination)

  - ParsingError (HTML parsing and region extraction failures)

  - FileError (CLI input/output failures)

Unsupported constructs are deliberately absent: an element with no matching
rule is rendered through the passthrough rule and reported at DEBUG level.

"""

from typing import Any


class Web2MdError(Exception):
    """Base exception class for all web2md-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class StructuralError(Web2MdError):
    """Exception raised when the input tree cannot be walked safely.

    Raised when the nesting depth exceeds the configured limit, or when the
    tree is malformed (a node attached to two parents, a parent link that does
    not match the child list). Fatal to the conversion call that hit it.

    Parameters
    ----------
    message : str
        Description of the structural problem
    depth : int, optional
        Depth at which the problem was detected
    tag : str, optional
        Tag name of the offending element
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        depth: int | None = None,
        tag: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the structural error with location details."""
        super().__init__(message, original_error=original_error)
        self.depth = depth
        self.tag = tag


class RuleError(Web2MdError):
    """Exception raised when a conversion rule fails.

    Wraps any exception raised by a rule's ``match``, ``enter`` or ``render``
    callback, and reports a ``render`` callback that returns something other
    than a string.

    Parameters
    ----------
    message : str
        Description of the failure
    rule_name : str, optional
        Name of the rule that failed
    tag : str, optional
        Tag name of the element being rendered
    original_error : Exception, optional
        The exception raised by the rule

    """

    def __init__(
        self,
        message: str,
        rule_name: str | None = None,
        tag: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the rule error with the failing rule's name."""
        super().__init__(message, original_error=original_error)
        self.rule_name = rule_name
        self.tag = tag


class ValidationError(Web2MdError):
    """Exception raised for invalid input parameters or options.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    Attributes
    ----------
    parameter_name : str or None
        The name of the problematic parameter
    parameter_value : any
        The value that caused the error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class OptionValidationError(ValidationError):
    """Exception raised when ConversionOptions hold an invalid value.

    Raised from ``ConversionOptions.__post_init__`` and from config loading,
    always before any tree walking begins.

    Parameters
    ----------
    option_name : str
        Name of the offending option
    option_value : any
        The rejected value
    message : str, optional
        Custom error message. If not provided, one is generated
    choices : sequence of str, optional
        Accepted values, included in the generated message

    """

    def __init__(
        self,
        option_name: str,
        option_value: Any,
        message: str | None = None,
        choices: Any = None,
    ):
        """Initialize the option validation error."""
        if message is None:
            message = f"Invalid value for option '{option_name}': {option_value!r}"
            if choices:
                message += f" (expected one of: {', '.join(repr(c) for c in choices)})"
        super().__init__(message, parameter_name=option_name, parameter_value=option_value)
        self.choices = choices


class ParsingError(Web2MdError):
    """Exception raised when HTML parsing or region extraction fails.

    Parameters
    ----------
    message : str
        Description of the parsing failure
    parsing_stage : str, optional
        The stage of parsing where the error occurred
    original_error : Exception, optional
        The underlying exception that caused the parsing failure

    """

    def __init__(self, message: str, parsing_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the parsing error."""
        super().__init__(message, original_error)
        self.parsing_stage = parsing_stage


class FileError(Web2MdError):
    """Exception raised when the CLI cannot read its input or write its output.

    Parameters
    ----------
    message : str
        Description of the file error
    file_path : str, optional
        Path to the problematic file
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, file_path: str | None = None, original_error: Exception | None = None):
        """Initialize the file error with path and message."""
        super().__init__(message, original_error=original_error)
        self.file_path = file_path


__all__ = [
    "Web2MdError",
    "StructuralError",
    "RuleError",
    "ValidationError",
    "OptionValidationError",
    "ParsingError",
    "FileError",
]
