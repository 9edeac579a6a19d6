"""API root."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter

from arcana.config import API_VERSION, Settings
from arcana.interface.api.envelope import Envelope, ok

router = APIRouter(tags=["root"], route_class=DishkaRoute)


@router.get("/", response_model=Envelope)
async def root(settings: FromDishka[Settings]) -> Envelope:
    return ok(
        {
            "name": "Persona Arcana API",
            "version": API_VERSION,
            "environment": settings.environment,
        }
    )
