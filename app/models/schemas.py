from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.services.pipeline.orchestrator import CrackMethod


# ============================================================================
# Scoring Schemas
# ============================================================================


class WordStatsSchema(BaseModel):
    """Dictionary recognition statistics."""

    model_config = ConfigDict(from_attributes=True)

    count: int
    total: int
    percentage: float = Field(ge=0.0, le=100.0)
    weighted_score: float = Field(ge=0.0)


class CandidateSchema(BaseModel):
    """A ranked candidate key."""

    model_config = ConfigDict(from_attributes=True)

    key: str
    key_length: int
    preview: str
    word_stats: WordStatsSchema
    chi_squared: float
    composite_score: float
    improved: bool | None = None
    iterations: int | None = None


# ============================================================================
# Request Schemas
# ============================================================================


class DecryptRequest(BaseModel):
    """Request schema for /vigenere/decrypt."""

    ciphertext: str = Field(min_length=1)
    key: str = Field(min_length=1, max_length=100)

    @field_validator("key")
    @classmethod
    def key_must_be_alphabetic(cls, value: str) -> str:
        value = value.strip()
        if not (value.isascii() and value.isalpha()):
            raise ValueError("Key must contain only letters A-Z")
        return value.upper()


class CrackRequest(BaseModel):
    """Request schema for /vigenere/crack."""

    ciphertext: str = Field(min_length=1)
    max_key_length: int | None = Field(default=None, ge=1)
    target_recognition: float | None = Field(default=None, ge=0.0, le=100.0)
    max_iterations: int | None = Field(default=None, ge=1)
    use_brute_force: bool = False
    known_keys: list[str] | None = None
    seed: int | None = None

    @field_validator("known_keys")
    @classmethod
    def keys_must_be_alphabetic(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return None
        keys = [key.strip().upper() for key in value]
        for key in keys:
            if not (key.isascii() and key.isalpha()):
                raise ValueError(f"Known key '{key}' must contain only letters A-Z")
        return keys


# ============================================================================
# Response Schemas
# ============================================================================


class DecryptResponse(BaseModel):
    """Response schema for /vigenere/decrypt."""

    decrypted_text: str
    word_stats: WordStatsSchema
    key: str


class CrackResponse(BaseModel):
    """Response schema for /vigenere/crack."""

    model_config = ConfigDict(from_attributes=True)

    top_results: list[CandidateSchema]
    full_decryption: str
    method: CrackMethod
    message: str | None = None


class StatusResponse(BaseModel):
    """Response schema for /vigenere/status."""

    status: str
    workers: int
    active_tasks: int
    active_workers: int
    pending_tasks: int
    completed_tasks: int
    failed_tasks: int
    uptime: str


# ============================================================================
# Error Schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)
