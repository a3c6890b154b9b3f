"""
Builder Errors

Error taxonomy shared by the analyzer, generator, packager and orchestrator.
"""

from enum import Enum


class BuilderError(Exception):
    """Base class for expected builder failures.

    Carries the HTTP status and title the server reports, plus a message
    safe to show to the caller.
    """

    status_code: int = 500
    error: str = "Build Generation Failed"

    def __init__(self, message: str):
        super().__init__(message)
        self.user_message = message


class InvalidDocumentKind(BuilderError):
    """The fetched document is not a CapabilityStatement."""

    status_code = 400
    error = "Invalid Capability Statement"

    def __init__(self, resource_type: object = None):
        self.resource_type = resource_type
        super().__init__(
            "Invalid resource type. Expected CapabilityStatement"
            + (f", got {resource_type}." if resource_type else ".")
        )


class FetchFailure(str, Enum):
    """Why a capability statement could not be fetched."""

    NOT_FOUND = "not_found"
    UNREACHABLE = "unreachable"
    OTHER = "other"


class UpstreamFetchError(BuilderError):
    """The remote FHIR server could not provide its capability statement."""

    error = "Capability Statement Unavailable"

    def __init__(self, kind: FetchFailure, url: str, detail: str | None = None):
        self.kind = kind
        self.url = url
        self.detail = detail

        if kind == FetchFailure.NOT_FOUND:
            message = "Capability Statement not found. Please check the URL."
            self.status_code = 400
        elif kind == FetchFailure.UNREACHABLE:
            message = (
                "Unable to connect to the FHIR server. "
                "Please check the URL and try again."
            )
        else:
            message = "Failed to analyze capability statement"
            if detail:
                message = f"{message}: {detail}"

        super().__init__(message)


class UnsupportedResourcesError(BuilderError):
    """Requested resources are not declared by the FHIR server."""

    status_code = 400
    error = "Unsupported Resources"

    def __init__(
        self,
        unsupported: list[str],
        supported: list[str],
        suggestions: list[str] | None = None,
    ):
        self.unsupported = list(unsupported)
        self.supported = list(supported)
        self.suggestions = list(suggestions or [])
        super().__init__(
            "The FHIR server does not support the following resources: "
            f"{', '.join(self.unsupported)}. "
            f"Supported resources: {', '.join(self.supported)}"
        )


class TemplateRenderError(BuilderError):
    """A template could not be rendered with the scaffold context."""

    def __init__(self, message: str, template: str | None = None):
        self.template = template
        super().__init__(message)


class UnsupportedStackError(BuilderError):
    """No template set is registered for the requested stack."""

    def __init__(self, stack: object):
        self.stack = stack
        super().__init__(f"No template set registered for stack: {stack}")


class PackagingError(BuilderError):
    """The generated scaffold could not be archived."""

    def __init__(self, message: str):
        super().__init__(
            f"{message}. Please try generating again."
        )


class InvalidBuildIdError(BuilderError):
    """The build identifier is malformed."""

    status_code = 400
    error = "Invalid Build ID"

    def __init__(self, build_id: str):
        self.build_id = build_id
        super().__init__("Build ID is required and must be valid")


class BuildNotFoundError(BuilderError):
    """No artifact exists for the build identifier."""

    status_code = 404
    error = "Build Not Found"

    def __init__(self, build_id: str):
        self.build_id = build_id
        super().__init__("The requested build ID was not found or has expired")
