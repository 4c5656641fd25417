from enum import Enum


class FeeStatus(str, Enum):
    RESOLVED = "RESOLVED"
    MISSING = "MISSING"  # receipt absent or gas fields unusable
    FAILED = "FAILED"  # receipt lookup failed after retries
