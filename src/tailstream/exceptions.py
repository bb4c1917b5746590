"""Custom exceptions for the tailstream package."""


class TailStreamError(Exception):
    """Base exception for all tailstream errors."""
    pass


class TrackingError(TailStreamError):
    """Error related to stream change tracking."""
    pass


class TrackingAlreadyStartedError(TrackingError):
    """Tracking was started on a tracker that is already tracking."""
    pass
