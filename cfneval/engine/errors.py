"""
Errors raised while loading and resolving CloudFormation templates.

Every failure of the resolution engine is fatal for the current resolution and propagates to the caller. The
value resolver annotates the innermost error with the template path at which it was raised, so callers can
report ``error.path`` together with the message.
"""
from typing import List, Optional


class TemplateResolutionError(Exception):
    """Base class of all errors raised by the resolution engine."""

    path: Optional[str]

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self):
        if self.path:
            return f"{self.message} (at {self.path})"
        return self.message


class InvalidIntrinsicObjectError(TemplateResolutionError):
    """An expected intrinsic function object is not a mapping with exactly one key."""


class MissingIntrinsicKeyError(TemplateResolutionError):
    """An intrinsic function object lacks the expected key, or a referenced name is not known."""


class UnresolvedReferenceError(MissingIntrinsicKeyError):
    """A name is neither a cached value (parameter, pseudo parameter) nor a logical resource id."""

    def __init__(self, name: str, path: Optional[str] = None):
        super().__init__(f"Unable to resolve reference '{name}': no parameter or resource with that name", path)
        self.name = name


class WrongIntrinsicFormatError(TemplateResolutionError):
    """The intrinsic function has the expected key but wrong arity, length or index."""

    def __init__(self, details: str, path: Optional[str] = None):
        super().__init__(f"Invalid Intrinsic object. Details: {details}", path)
        self.details = details


class UnexpectedVariableTypeError(TemplateResolutionError):
    """A (resolved) operand has an unexpected runtime type."""


class LookupTraversalError(TemplateResolutionError):
    """A lookup in Mappings or in the attributes of a resource failed."""


class MappingNotFoundError(LookupTraversalError):
    pass


class AttributeNotSupportedError(LookupTraversalError):
    def __init__(self, resource_type: str, logical_id: str, attribute: str, path: Optional[str] = None):
        super().__init__(
            f"Attribute '{attribute}' of resource '{logical_id}' (type {resource_type}) cannot be resolved",
            path,
        )
        self.resource_type = resource_type
        self.logical_id = logical_id
        self.attribute = attribute


class CircularReferenceError(TemplateResolutionError):
    def __init__(self, chain: List[str], path: Optional[str] = None):
        super().__init__(f"Circular reference between resources: {' -> '.join(chain)}", path)
        self.chain = chain


class ResolvingContextError(TemplateResolutionError):
    """Misuse of the cache of the resolving context."""


class ParameterNotFoundError(ResolvingContextError):
    def __init__(self, key: str):
        super().__init__(f"Parameter '{key}' not found in resolving context")
        self.key = key


class DuplicateParameterError(ResolvingContextError):
    def __init__(self, key: str):
        super().__init__(f"Parameter '{key}' already exists in resolving context")
        self.key = key


class MissingParametersError(ResolvingContextError):
    def __init__(self, missing: List[str]):
        super().__init__(f"Missing values for parameters: {', '.join(missing)}")
        self.missing = missing


#
# Errors of the input boundary
#


class TemplateInputError(Exception):
    """Base class of errors raised when loading a template from its serialized form."""


class InvalidTemplateInputError(TemplateInputError):
    """The raw template input is empty."""


class TemplateParsingError(TemplateInputError):
    """The raw template input is neither valid JSON nor valid YAML."""


class TemplateValidationError(TemplateInputError):
    """The parsed template does not conform to the template schema."""

    def __init__(self, message: str, schema_path: Optional[str] = None):
        super().__init__(message)
        self.schema_path = schema_path


class TemplateProcessingError(Exception):
    """The template could not be fully resolved."""
