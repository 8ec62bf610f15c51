"""Errors shared by the vendor service handles."""


class ServiceConfigurationError(RuntimeError):
    """Raised at construction time when a service handle lacks credentials."""


class AssessmentUnavailable(RuntimeError):
    """Pronunciation scoring could not be produced for this answer."""


__all__ = ["ServiceConfigurationError", "AssessmentUnavailable"]
