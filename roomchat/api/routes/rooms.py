from fastapi import APIRouter, Depends
from roomchat.core.deps_api import get_current_user_api
from roomchat.schemas.auth import MemberOut
from roomchat.services.gateway import SessionGateway, get_gateway

router = APIRouter(prefix="/rooms", dependencies=[Depends(get_current_user_api)])

@router.get("", response_model=list[str])
async def list_rooms(gateway: SessionGateway = Depends(get_gateway)):
    return await gateway.directory.rooms()

@router.get("/{room}/members", response_model=list[MemberOut])
async def room_members(room: str, gateway: SessionGateway = Depends(get_gateway)):
    return [m.to_dict() for m in await gateway.directory.members_of(room)]
