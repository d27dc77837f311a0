"""Shared FastAPI dependencies and error translation for demo routes."""

from fastapi import Depends, HTTPException, Request

from gridquery.config import Settings, get_settings
from gridquery.crypto import DecryptionError, fernet_decryptor
from gridquery.exceptions import (
    GridQueryError,
    InvalidQueryError,
    MapperNotFoundError,
    MappingNotFoundError,
    MissingDecryptorError,
    SelectorTypeError,
    UnsupportedAggregateError,
)
from gridquery.mapping.registry import MapperRegistry
from gridquery.services.distinct import Decryptor


def get_mapper_registry(request: Request) -> MapperRegistry:
    return request.app.state.mapper_registry


def get_decryptor(settings: Settings = Depends(get_settings)) -> Decryptor | None:
    if not settings.encryption_key:
        return None
    return fernet_decryptor(settings.encryption_key)


def to_http_error(exc: GridQueryError) -> HTTPException:
    """Map a query error onto the HTTP status a client should see."""

    if isinstance(exc, (InvalidQueryError, SelectorTypeError)):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, (MapperNotFoundError, MappingNotFoundError)):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, MissingDecryptorError):
        return HTTPException(status_code=424, detail=str(exc))
    if isinstance(exc, UnsupportedAggregateError):
        return HTTPException(status_code=501, detail=str(exc))
    if isinstance(exc, DecryptionError):
        return HTTPException(status_code=422, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))
