from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import Field

from ..core.state_machine import TimerCommand, TimerSession
from ..models.recipe import CamelModel
from ..services.process_loader import ProcessLoader
from ..services.servings import format_quantity, ingredient_quantity
from .deps import get_loader, get_session

router = APIRouter(prefix="/api/v1")


class ServingRequest(CamelModel):
    serving_size: int = Field(ge=1)


class QuantityRequest(CamelModel):
    quantities_by_servings: Dict[str, float]
    serving_size: int = Field(ge=1)
    default_serving: int = Field(ge=1)


class QuantityResponse(CamelModel):
    quantity: Optional[float] = None
    text: str = ""


def _view(session: TimerSession) -> dict:
    return session.view().model_dump(mode="json", by_alias=True)


@router.get("/recipes")
def list_recipes(loader: ProcessLoader = Depends(get_loader)) -> List[str]:
    return loader.slugs()


@router.get("/recipes/{slug}/display")
def get_display(session: TimerSession = Depends(get_session)):
    return _view(session)


@router.post("/recipes/{slug}/serving")
def set_serving(body: ServingRequest, session: TimerSession = Depends(get_session)):
    session.update_serving_size(body.serving_size)
    return _view(session)


@router.post("/recipes/{slug}/{command}")
def run_command(command: str, session: TimerSession = Depends(get_session)):
    try:
        parsed = TimerCommand(command)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown command '{command}'")
    session.handle(parsed)
    return _view(session)


@router.post("/quantities")
def scale_quantity(body: QuantityRequest):
    quantity = ingredient_quantity(body.quantities_by_servings, body.serving_size, body.default_serving)
    return QuantityResponse(quantity=quantity, text=format_quantity(quantity)).model_dump(by_alias=True)
