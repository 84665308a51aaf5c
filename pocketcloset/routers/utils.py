from fastapi import APIRouter

from pocketcloset.schemas import ReverseGeocodeRequest
from pocketcloset.utils.weather import reverse_geocode

router = APIRouter(prefix="/utils", tags=["Utils"])


@router.post("/reverse-geocode")
def reverse_geocode_location(payload: ReverseGeocodeRequest):
    """City for a coordinate pair. Lookup failures answer "Unknown location"."""
    return {"ok": True, "city": reverse_geocode(payload.latitude, payload.longitude)}
