"""ciseed exception hierarchy.

All public exceptions inherit from CiseedError, giving callers a single
base class to catch when they want to handle any ciseed-specific failure
without swallowing unrelated errors.
"""


class CiseedError(Exception):
    """Base exception for all ciseed errors."""


class DetectionError(CiseedError):
    """Raised when a platform scanner cannot read the search directory.

    Only filesystem failures (permission denied, unreadable paths) end up
    here. A directory that simply holds no project of the scanner's kind
    is not an error.
    """


class OptionTreeError(CiseedError):
    """Raised when an option tree is built or wired incorrectly.

    Covers questions without any answer, duplicate answer keys and child
    references that point outside the tree.
    """


class NoConfigSelectedError(CiseedError):
    """Raised when resolving an option tree does not reach a config.

    Happens when the chosen answer has no matching child and the question
    offers more than one branch.
    """


class UnknownConfigError(CiseedError):
    """Raised when a config id has no pipeline template.

    A leaf pointing at a missing template is a scanner defect, so this
    should never surface for well-formed scanners.
    """


class TemplateError(CiseedError):
    """Raised when pipeline template text cannot be parsed."""


class AnswerError(CiseedError):
    """Raised when an answer source cannot answer a question.

    The preset (non-interactive) answer source raises this for free-text
    questions it holds no answer for, and for answers outside the offered
    choices.
    """


class CatalogError(CiseedError):
    """Raised when the step catalog file is missing or malformed."""
