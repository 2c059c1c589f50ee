"""Proof-of-work challenges for gating form submissions.

Example:
    from altcha import Altcha, ChallengeOptions
    altcha = Altcha("server-secret")
    challenge = altcha.create_challenge(ChallengeOptions(max_number=50_000))
    altcha.verify_solution(token_from_form)
"""

from altcha.core.algorithm import Algorithm
from altcha.core.errors import (
    AltchaError,
    DecryptionError,
    EncryptionError,
    UnsupportedAlgorithmError,
)
from altcha.core.pow import create_challenge, extract_params
from altcha.schemas import (
    Challenge,
    ChallengeOptions,
    Payload,
    ServerSignaturePayload,
    ServerSignatureVerification,
    ServerSignatureVerificationData,
    Solution,
)
from altcha.services import AesGcmCipher, Altcha, AuthenticatedCipher, Obfuscator, RevealedData
from altcha.utils.hash import HashlibHasher, Hasher
from altcha.utils.pow_client import solve_challenge

__version__ = "0.1.0"

__all__ = [
    "Algorithm",
    "AltchaError",
    "AesGcmCipher",
    "Altcha",
    "AuthenticatedCipher",
    "Challenge",
    "ChallengeOptions",
    "DecryptionError",
    "EncryptionError",
    "HashlibHasher",
    "Hasher",
    "Obfuscator",
    "Payload",
    "RevealedData",
    "ServerSignaturePayload",
    "ServerSignatureVerification",
    "ServerSignatureVerificationData",
    "Solution",
    "UnsupportedAlgorithmError",
    "create_challenge",
    "extract_params",
    "solve_challenge",
]
