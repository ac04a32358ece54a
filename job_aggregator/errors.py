"""Exception hierarchy for the aggregator."""


class JobAggregatorError(Exception):
    """Base exception for all aggregator errors."""

    def __init__(self, message: str = "Job aggregator error"):
        self.message = message
        super().__init__(self.message)


class InputError(JobAggregatorError):
    """Missing or invalid caller input (empty query, bad URL, unknown platform)."""

    def __init__(self, message: str = "Invalid input"):
        super().__init__(message)


class UpstreamAuthError(JobAggregatorError):
    """Missing or rejected credentials for an external service."""

    def __init__(self, message: str = "External service credentials missing or invalid"):
        super().__init__(message)


class GenerationError(JobAggregatorError):
    """The language model returned no content or content that is not usable JSON."""

    def __init__(self, message: str = "No usable response from AI"):
        super().__init__(message)


ModelOutputError = GenerationError


class UpstreamTimeout(JobAggregatorError):
    """A scraping run exceeded its time ceiling."""

    def __init__(self, message: str = "External search timed out"):
        super().__init__(message)


class UpstreamFailure(JobAggregatorError):
    """A scraping or profile service call failed for a non-credential reason."""

    def __init__(self, message: str = "External service call failed"):
        super().__init__(message)


class ProfileFetchError(JobAggregatorError):
    """Base for LinkedIn profile fetch failures."""


class ProfileNotFound(ProfileFetchError):
    def __init__(self, message: str = "LinkedIn profile not found"):
        super().__init__(message)


class ProfileUnauthorized(ProfileFetchError):
    def __init__(self, message: str = "Profile API rejected the credentials"):
        super().__init__(message)


class ProfileRateLimited(ProfileFetchError):
    def __init__(self, message: str = "Profile API rate limit exceeded, try again later"):
        super().__init__(message)


class DocumentError(JobAggregatorError):
    """Base for CV document extraction failures."""


class UnsupportedFileType(DocumentError):
    def __init__(self, message: str = "Unsupported file type"):
        super().__init__(message)


class FileTooLarge(DocumentError):
    def __init__(self, message: str = "File exceeds the size limit"):
        super().__init__(message)


class ExtractionFailed(DocumentError):
    def __init__(self, message: str = "Could not extract text from file"):
        super().__init__(message)
