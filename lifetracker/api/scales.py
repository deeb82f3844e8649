"""Scale table endpoint so clients pick slider ranges and composer layouts from one source."""

from typing import Annotated

from fastapi import APIRouter, Depends

from lifetracker.api.auth import get_current_user
from lifetracker.schemas.auth import CurrentUser
from lifetracker.schemas.scales import ScaleInfo, ScalesResponse
from lifetracker.services.scales import COMPOSER_LAYOUTS, DEFAULT_SCALE_TYPES, SCALES

router = APIRouter()


@router.get("", response_model=ScalesResponse)
def get_scales(_user: Annotated[CurrentUser, Depends(get_current_user)]) -> ScalesResponse:
    return ScalesResponse(
        scales={name: ScaleInfo(**scale._asdict()) for name, scale in SCALES.items()},
        default_scale_types=dict(DEFAULT_SCALE_TYPES),
        layouts=dict(COMPOSER_LAYOUTS),
    )
