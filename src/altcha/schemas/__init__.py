"""
Pydantic schemas for the challenge protocol's wire shapes.
"""

from .challenge import Challenge, ChallengeOptions, Payload, Solution
from .server_signature import (
    ServerSignaturePayload,
    ServerSignatureVerification,
    ServerSignatureVerificationData,
)

__all__ = [
    "Challenge", "ChallengeOptions", "Payload", "Solution",
    "ServerSignaturePayload",
    "ServerSignatureVerification",
    "ServerSignatureVerificationData",
]
