import uuid
from typing import Any, Optional

from fastapi import APIRouter

from signage import crud
from signage.api.deps import CurrentUser, SessionDep
from signage.models.schemas.interaction import (
    InteractionCreate,
    InteractionPublic,
    InteractionsPublic,
)
from signage.models.schemas.message import Message

router = APIRouter()


@router.post("/", response_model=Message)
def create_interaction(session: SessionDep, interaction_in: InteractionCreate) -> Any:
    """
    Append an impression or click to the analytics log.
    """
    crud.create_interaction(session=session, interaction_in=interaction_in)
    return Message(message="Interaction recorded")


@router.get("/", response_model=InteractionsPublic)
def read_interactions(
    session: SessionDep,
    current_user: CurrentUser,
    ad_id: Optional[uuid.UUID] = None,
    skip: int = 0,
    limit: int = 100,
) -> Any:
    """
    The interaction log, newest first, optionally for a single ad.
    """
    interactions = crud.get_interactions(session=session, ad_id=ad_id, skip=skip, limit=limit)
    titles = crud.get_ad_titles(session=session)
    data = [
        InteractionPublic.model_validate(i, update={"ad_title": titles.get(str(i.ad_id))})
        for i in interactions
    ]
    return InteractionsPublic(data=data, count=len(data))
