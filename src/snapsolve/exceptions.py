"""Exceptions raised or returned by the snapsolve pipeline"""  # noqa: D415


class SnapSolveError(Exception):
    """Base exception for snapsolve errors"""  # noqa: D415

    user_message = "Something went wrong while processing the screenshots."

    def __init__(self, message: str | None = None) -> None:  # noqa: D107
        super().__init__(message or self.user_message)


class ProviderUnavailableError(SnapSolveError):
    """Raised when no provider client can be used (missing or rejected API key)"""  # noqa: D415

    user_message = "No usable API key. Please check your API key in settings."


class EmptyResponseError(SnapSolveError):
    """Raised when the provider returned no text"""  # noqa: D415

    user_message = "Failed to parse response: the model returned no content."


class MalformedJSONError(SnapSolveError):
    """Raised when the extraction output is not valid JSON"""  # noqa: D415

    user_message = "Failed to parse response: the model output was not valid JSON."

    def __init__(self, message: str | None = None, raw_text: str = "") -> None:  # noqa: D107
        super().__init__(message)
        self.raw_text = raw_text


class NoScreenshotsError(SnapSolveError):
    """Raised when the screenshot batch is empty after filtering"""  # noqa: D415

    user_message = "No screenshots to process."


class CallFailureError(SnapSolveError):
    """Raised when a provider call fails on the network or provider side"""  # noqa: D415

    user_message = "The provider request failed."


class RunCancelledError(SnapSolveError):
    """Raised when a run observes its cancellation token"""  # noqa: D415

    user_message = "Processing was canceled by the user."


class ConfigurationError(SnapSolveError):
    """Raised when configuration values are invalid"""  # noqa: D415

    user_message = "Invalid configuration."


class ConfigFileError(ConfigurationError):
    """Raised when a configuration file cannot be read or parsed."""

    def __init__(self, file_path, message: str, cause: Exception | None = None) -> None:
        """Initialize with file path, message, and optional cause.

        Args:
            file_path: The file that failed to load
            message: Human-readable error message
            cause: The underlying exception that caused the failure
        """
        self.file_path = file_path
        self.message = message
        self.cause = cause
        super().__init__(f"Config file error in {file_path}: {message}")
