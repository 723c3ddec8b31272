"""
Error taxonomy for the publishing pipeline.

Account-level failures derive from PlatformError and are converted into a
failed outcome for that account only. NotFoundError and PolicyViolationError
surface to whoever invoked the operation.
"""


class SocialPublisherError(Exception):
    """Base class for all publisher errors."""


class NotFoundError(SocialPublisherError):
    """Referenced post does not exist (or is not visible to the caller)."""

    def __init__(self, entity: str, entity_id: object) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found: {entity_id}")


class PolicyViolationError(SocialPublisherError):
    """Operation is not permitted in the post's current status."""


class PlatformError(SocialPublisherError):
    """Failure scoped to a single target account."""


class ValidationError(PlatformError):
    """Request cannot be published as given (e.g. Instagram without media)."""


class PlatformApiError(PlatformError):
    """Provider returned an error payload or the call did not complete."""

    def __init__(self, platform: str, message: str) -> None:
        self.platform = platform
        self.provider_message = message
        super().__init__(f"{platform} API: {message}")


class ProcessingError(PlatformError):
    """Instagram reported ERROR while processing a media container."""


class ProcessingTimeoutError(PlatformError, TimeoutError):
    """Media container did not become ready within the allowed poll attempts."""
