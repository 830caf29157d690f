"""Runtime primitives (request admission)."""

from voice2action.runtime.admission import AdmissionQueue, AdmissionStatus

__all__ = ["AdmissionQueue", "AdmissionStatus"]
