"""
Crack pipeline for Vigenère ciphertext.

Two strategies produce ranked candidate keys:
1. Brute force over a known-key list, refined when recognition falls short
2. Cryptanalysis: key-length estimation, per-position shift scoring,
   bounded key combination and hill-climbing refinement
"""

from app.services.pipeline.orchestrator import (
    CrackMethod,
    CrackOrchestrator,
    CrackResult,
    CrackTask,
)

__all__ = [
    "CrackMethod",
    "CrackOrchestrator",
    "CrackResult",
    "CrackTask",
]
