#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the htmldown library.

This module defines specialized exception classes for the error conditions
that can occur while configuring a converter or converting HTML to Markdown.
Built-in conversion paths never raise on malformed HTML; only configuration
mistakes and failures inside user-supplied rules are reported.

Exception Hierarchy
-------------------
- HtmldownError (base exception)

  - ValidationError (parameter/input validation)
    - ConfigurationError (invalid options or configuration files)

  - ParsingError (HTML input could not be parsed)

  - RuleExecutionError (a custom rule's replacement function raised)

  - DependencyError (missing optional parser backend)

"""

from typing import Any


class HtmldownError(Exception):
    """Base exception class for all htmldown-specific errors.

    Catching this will catch all library-specific errors.

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


class ValidationError(HtmldownError):
    """Exception raised for invalid input parameters.

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


class ConfigurationError(ValidationError):
    """Exception raised when an options value or combination is invalid.

    Raised when constructing :class:`~htmldown.options.TurndownOptions` or a
    :class:`~htmldown.service.TurndownService` with an unrecognized value,
    an unknown option name, or an unreadable configuration file. Invalid
    values are never silently replaced with defaults.

    Parameters
    ----------
    message : str
        Description of the configuration problem
    parameter_name : str, optional
        Name of the offending option
    parameter_value : any, optional
        The rejected value
    original_error : Exception, optional
        The original exception that caused this error

    """


class ParsingError(HtmldownError):
    """Exception raised when HTML input cannot be turned into a DOM tree.

    Parameters
    ----------
    message : str
        Description of the parsing failure
    parsing_stage : str, optional
        The stage of parsing where the error occurred
    original_error : Exception, optional
        The underlying exception that caused the parsing failure

    Attributes
    ----------
    parsing_stage : str or None
        Where in the parsing process the error occurred

    """

    def __init__(self, message: str, parsing_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the parsing error."""
        super().__init__(message, original_error)
        self.parsing_stage = parsing_stage


class RuleExecutionError(HtmldownError):
    """Exception raised when a custom rule's replacement function fails.

    The conversion call that triggered the rule is aborted; the service that
    owns the rule stays usable because its registry is never modified during
    conversion.

    Parameters
    ----------
    message : str
        Description of the failure
    rule_name : str, optional
        Name under which the failing rule was registered
    original_error : Exception, optional
        The exception raised by the replacement function

    Attributes
    ----------
    rule_name : str or None
        Name of the rule that failed

    """

    def __init__(self, message: str, rule_name: str | None = None, original_error: Exception | None = None):
        """Initialize the rule execution error."""
        super().__init__(message, original_error)
        self.rule_name = rule_name


class DependencyError(HtmldownError):
    """Exception raised when an optional dependency is not available.

    Used when the configured BeautifulSoup parser backend (``lxml`` or
    ``html5lib``) is not installed.

    Parameters
    ----------
    feature_name : str
        Name of the feature requiring the dependency
    missing_packages : list[tuple[str, str]]
        List of (package_name, version_spec) tuples for missing packages
    message : str, optional
        Custom error message. If not provided, generates a helpful message
    original_import_error : Exception, optional
        The error reported when loading the package

    Attributes
    ----------
    feature_name : str
        The feature that has missing dependencies
    missing_packages : list[tuple[str, str]]
        Packages that need to be installed

    """

    def __init__(
        self,
        feature_name: str,
        missing_packages: list[tuple[str, str]],
        message: str | None = None,
        original_import_error: Exception | None = None,
    ):
        """Initialize the dependency error with package details."""
        if message is None:
            pkg_list = ", ".join(f"'{name}{spec}'" if spec else f"'{name}'" for name, spec in missing_packages)
            message = f"{feature_name} requires the following packages: {pkg_list}"
            if missing_packages:
                packages_str = " ".join(f'"{name}{spec}"' if spec else name for name, spec in missing_packages)
                message += f"\nInstall with: pip install --upgrade {packages_str}"

        super().__init__(message, original_import_error)
        self.feature_name = feature_name
        self.missing_packages = missing_packages
