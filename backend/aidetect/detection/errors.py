# aidetect/detection/errors.py
class DetectionError(Exception):
    """Base provider error (wrapped)."""

class DetectionRetryableError(DetectionError):
    """Transient error while polling: timeouts, 5xx, 429, network, unreadable body."""
