"""Exception taxonomy for the sleep tracking service.

Advisory errors never leave ``sleeptrack.core.llm``: each gateway operation
converts them into its fixed fallback value. The remaining errors are mapped to
HTTP responses by the application factory.
"""


class SleepTrackError(Exception):
    """Base class for all service errors."""


class AdvisoryError(SleepTrackError):
    """The advisory gateway could not produce a usable answer."""


class CredentialMissing(AdvisoryError):
    """No API key is configured, so no request was attempted."""


class AdvisoryServiceFailure(AdvisoryError):
    """Network, transport or service-side failure."""


class MalformedAdvisoryResponse(AdvisoryError):
    """The reply did not match the requested JSON shape."""


class UserNotFound(SleepTrackError):
    pass


class FlowBusy(SleepTrackError):
    """An advisory request for this flow is already in flight."""


class InvalidAnswer(SleepTrackError):
    """An onboarding answer outside the current question's answer domain."""


class OnboardingNotActive(SleepTrackError):
    pass
