from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status

from guestbook.api.dependencies import get_entry_service
from guestbook.core.dto.entry import (
    EntryCommentModel,
    EntryCreatedModel,
    EntryCreateModel,
    EntryModel,
    PublicEntryModel,
)
from guestbook.core.rate_limit import resolve_client_address
from guestbook.core.services.entry_service import EntryService
from guestbook.infrastructure.errors.entry_errors import (
    EntryDecisionConflict,
    EntryNotFound,
    EntryValidationError,
    PostLimitExceeded,
)
from guestbook.utils.error_extra import error_response


router = APIRouter()


@router.get(
    "",
    response_model=list[PublicEntryModel],
    summary="List approved entries",
)
async def get_approved_entries(
    service: Annotated[EntryService, Depends(get_entry_service)]
) -> list[PublicEntryModel]:
    return await service.get_approved_entries()


@router.post(
    "",
    response_model=EntryCreatedModel,
    status_code=status.HTTP_201_CREATED,
    summary="Submit an entry",
    responses={**error_response(EntryValidationError), **error_response(PostLimitExceeded)},
)
async def create_entry(
    data: EntryCreateModel,
    request: Request,
    service: Annotated[EntryService, Depends(get_entry_service)]
) -> EntryCreatedModel:
    """
    Store a new pending entry and send the moderation link to the admin.

    The generated id is deliberately not part of the response; it only
    travels in the admin notification.

    Raises:
        SpamCodeMismatch (400): ``{"error": "code"}``.
        EntryValidationError (400): ``{"error": "validation"}``.
        PostLimitExceeded (429): same address posted too recently.
    """
    await service.submit_entry(data, origin=resolve_client_address(request))
    return EntryCreatedModel()


@router.get(
    "/{entry_id}",
    response_model=EntryModel,
    summary="Get one entry",
    responses={**error_response(EntryNotFound)},
)
async def get_entry(
    entry_id: str,
    service: Annotated[EntryService, Depends(get_entry_service)]
) -> EntryModel:
    return await service.get_entry(entry_id)


@router.post(
    "/{entry_id}/approve",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Approve an entry",
    responses={**error_response(EntryNotFound), **error_response(EntryDecisionConflict)},
)
async def approve_entry(
    entry_id: str,
    service: Annotated[EntryService, Depends(get_entry_service)]
) -> Response:
    await service.approve_entry(entry_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{entry_id}/reject",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Reject an entry",
    responses={**error_response(EntryNotFound), **error_response(EntryDecisionConflict)},
)
async def reject_entry(
    entry_id: str,
    service: Annotated[EntryService, Depends(get_entry_service)]
) -> Response:
    await service.reject_entry(entry_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put(
    "/{entry_id}/comment",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Comment on an entry",
    responses={**error_response(EntryValidationError), **error_response(EntryNotFound)},
)
async def comment_entry(
    entry_id: str,
    data: EntryCommentModel,
    service: Annotated[EntryService, Depends(get_entry_service)]
) -> Response:
    await service.comment_entry(entry_id, data.comment)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
