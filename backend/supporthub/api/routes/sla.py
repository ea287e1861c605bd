from fastapi import APIRouter, Depends

from supporthub.api.dependencies import get_caller
from supporthub.schemas.caller import CallerContext
from supporthub.schemas.sla_config import SlaConfigItem
from supporthub.services import sla_config_service

router = APIRouter()


@router.get("", response_model=list[SlaConfigItem])
async def get_sla_config(
    caller: CallerContext = Depends(get_caller),
):
    """Get the response and resolution targets per priority."""
    return sla_config_service.get_all()
