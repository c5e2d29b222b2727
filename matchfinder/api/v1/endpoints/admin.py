from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from matchfinder.api.deps import get_stadium_resolver, require_admin
from matchfinder.core.database import get_db
from matchfinder.core.errors import MatchNotFound, ValidationFailed
from matchfinder.schemas.match import AdminMatchIn, AdminMatchOut, MatchCreated, MatchRef
from matchfinder.services.admin_service import AdminMatchService
from matchfinder.services.stadium_resolver import StadiumResolver

router = APIRouter(prefix="/admin", dependencies=[Depends(require_admin)])


def get_admin_service(
    db: Session = Depends(get_db),
    resolver: StadiumResolver = Depends(get_stadium_resolver),
) -> AdminMatchService:
    return AdminMatchService(db, resolver)


def _not_found():
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Match not found")


@router.get("/matches", response_model=List[AdminMatchOut])
def list_matches(service: AdminMatchService = Depends(get_admin_service)):
    """
    Every stored match, past ones included, ordered by date.
    """
    return service.list_matches()


@router.get("/matches/{match_id}", response_model=AdminMatchOut)
def get_match(match_id: int, service: AdminMatchService = Depends(get_admin_service)):
    """
    One match with flat latitude/longitude. 404 if the id is unknown.
    """
    try:
        return service.get_match(match_id)
    except MatchNotFound:
        raise _not_found()


@router.post("/matches", response_model=MatchCreated, status_code=status.HTTP_201_CREATED)
def create_match(payload: AdminMatchIn, service: AdminMatchService = Depends(get_admin_service)):
    """
    Creates a match after validating it and geocoding its stadium.
    Missing fields or an unknown stadium answer 400 and store nothing.
    """
    try:
        new_id = service.create_match(payload)
    except ValidationFailed as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return MatchCreated(id=new_id)


@router.put("/matches/{match_id}", response_model=MatchRef)
def update_match(match_id: int, payload: AdminMatchIn, service: AdminMatchService = Depends(get_admin_service)):
    """
    Replaces every field of a match and geocodes the new stadium.
    400 on invalid input, 404 if the id is unknown.
    """
    try:
        return MatchRef(id=service.update_match(match_id, payload))
    except ValidationFailed as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except MatchNotFound:
        raise _not_found()


@router.delete("/matches/{match_id}", response_model=MatchRef)
def delete_match(match_id: int, service: AdminMatchService = Depends(get_admin_service)):
    """
    Deletes a match. 404 if the id is unknown.
    """
    try:
        return MatchRef(id=service.delete_match(match_id))
    except MatchNotFound:
        raise _not_found()
