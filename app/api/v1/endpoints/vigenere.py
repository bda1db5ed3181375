import logging

from fastapi import APIRouter, HTTPException, Request, status

from app.core.config import Settings
from app.core.exceptions import CiphertextTooLongError, InvalidInputError
from app.core.rate_limit import limiter, request_limit
from app.dependencies import DictionaryDep, DispatcherDep, KnownKeysDep, SettingsDep
from app.models.schemas import (
    CrackRequest,
    CrackResponse,
    DecryptRequest,
    DecryptResponse,
    ErrorResponse,
    StatusResponse,
    WordStatsSchema,
)
from app.services.analysis.words import count_recognized_words
from app.services.dispatch.dispatcher import TaskError, TaskErrorKind
from app.services.engines.vigenere import decrypt_with_key
from app.services.pipeline.orchestrator import CrackTask

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/decrypt",
    response_model=DecryptResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input"},
        429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
        500: {"model": ErrorResponse, "description": "Decryption failed"},
    },
    summary="Decrypt with a known key",
    description="Decrypt Vigenère ciphertext with a known key and report recognized words.",
)
@limiter.limit(request_limit)
async def decrypt_ciphertext(
    request: Request,
    payload: DecryptRequest,
    settings: SettingsDep,
    dictionary: DictionaryDep,
) -> DecryptResponse:
    """Decrypt ciphertext with the supplied key."""
    try:
        _check_length(payload.ciphertext, settings)
        decrypted = decrypt_with_key(payload.ciphertext, payload.key)
        word_stats = count_recognized_words(decrypted, dictionary)
    except InvalidInputError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )

    return DecryptResponse(
        decrypted_text=decrypted,
        word_stats=WordStatsSchema.model_validate(word_stats),
        key=payload.key,
    )


@router.post(
    "/crack",
    response_model=CrackResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input"},
        429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
        422: {"model": ErrorResponse, "description": "Ciphertext too short"},
        500: {"model": ErrorResponse, "description": "Cracking failed"},
    },
    summary="Crack ciphertext",
    description=(
        "Recover an unknown Vigenère key, either by trying known keys "
        "(brute force) or by frequency analysis and hill-climbing."
    ),
)
@limiter.limit(request_limit)
async def crack_ciphertext(
    request: Request,
    payload: CrackRequest,
    settings: SettingsDep,
    dispatcher: DispatcherDep,
    known_keys: KnownKeysDep,
) -> CrackResponse:
    """
    Crack ciphertext on the worker pool.

    When brute force is requested without an explicit key list, the
    server's known-key list is used.
    """
    try:
        _check_length(payload.ciphertext, settings)
    except CiphertextTooLongError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )

    task = _build_task(payload, settings, known_keys)
    outcome = await dispatcher.run(task)

    if isinstance(outcome, TaskError):
        if outcome.kind == TaskErrorKind.INSUFFICIENT_DATA:
            code = status.HTTP_422_UNPROCESSABLE_ENTITY
        elif outcome.kind == TaskErrorKind.INVALID_INPUT:
            code = status.HTTP_400_BAD_REQUEST
        else:
            code = status.HTTP_500_INTERNAL_SERVER_ERROR
        raise HTTPException(status_code=code, detail=outcome.message)

    response = CrackResponse.model_validate(outcome)
    if not response.top_results:
        response.message = "No viable solutions found"
    elif response.message is None:
        response.message = "Cipher cracked successfully"
    return response


@router.get(
    "/status",
    response_model=StatusResponse,
    summary="Worker pool status",
    description="Report worker count, running and queued tasks, task counters and uptime.",
)
async def get_status(dispatcher: DispatcherDep) -> StatusResponse:
    """Report dispatcher status."""
    snapshot = dispatcher.status()
    uptime = int(snapshot.uptime_seconds)

    return StatusResponse(
        status="operational" if snapshot.running else "stopped",
        workers=snapshot.workers,
        active_tasks=snapshot.active_tasks,
        active_workers=snapshot.active_workers,
        pending_tasks=snapshot.pending_tasks,
        completed_tasks=snapshot.completed_tasks,
        failed_tasks=snapshot.failed_tasks,
        uptime=f"{uptime // 60} minutes, {uptime % 60} seconds",
    )


def _check_length(ciphertext: str, settings: Settings) -> None:
    if len(ciphertext) > settings.max_ciphertext_length:
        raise CiphertextTooLongError(len(ciphertext), settings.max_ciphertext_length)


def _build_task(
    payload: CrackRequest,
    settings: Settings,
    known_keys: tuple[str, ...],
) -> CrackTask:
    max_key_length = payload.max_key_length or settings.default_max_key_length
    max_iterations = payload.max_iterations or settings.default_max_iterations
    target = payload.target_recognition
    if target is None:
        target = settings.default_target_recognition

    if max_key_length > settings.max_key_length_limit:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"max_key_length cannot exceed {settings.max_key_length_limit}",
        )
    if max_iterations > settings.max_iterations_limit:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"max_iterations cannot exceed {settings.max_iterations_limit}",
        )

    keys: tuple[str, ...] = ()
    if payload.use_brute_force:
        keys = tuple(payload.known_keys) if payload.known_keys else known_keys

    return CrackTask(
        ciphertext=payload.ciphertext,
        max_key_length=max_key_length,
        target_recognition=target,
        max_iterations=max_iterations,
        use_brute_force=payload.use_brute_force,
        known_keys=keys,
        seed=payload.seed,
    )
