from typing import Annotated

from fastapi import Depends, Request

from app.core.config import Settings, get_settings
from app.services.analysis.words import Dictionary
from app.services.dispatch.dispatcher import CrackDispatcher


# Settings dependency
SettingsDep = Annotated[Settings, Depends(get_settings)]


# Lifespan-owned resources live on app.state
def get_dispatcher(request: Request) -> CrackDispatcher:
    """Get the crack dispatcher started by the lifespan."""
    return request.app.state.dispatcher


def get_dictionary(request: Request) -> Dictionary:
    """Get the shared read-only dictionary."""
    return request.app.state.dictionary


def get_known_keys(request: Request) -> tuple[str, ...]:
    """Get the known-key list used for brute force."""
    return request.app.state.known_keys


DispatcherDep = Annotated[CrackDispatcher, Depends(get_dispatcher)]
DictionaryDep = Annotated[Dictionary, Depends(get_dictionary)]
KnownKeysDep = Annotated[tuple[str, ...], Depends(get_known_keys)]
