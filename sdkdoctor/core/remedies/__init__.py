"""Remedies — automated repair actions.

Public re-exports for convenient access.
"""

from sdkdoctor.core.remedies.base import Remedy, StatusListener
from sdkdoctor.core.remedies.boots import BootsRemedy

__all__ = [
    "BootsRemedy",
    "Remedy",
    "StatusListener",
]
