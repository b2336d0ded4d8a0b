"""Species lookup proxy endpoint (iNaturalist taxa autocomplete)."""

from fastapi import APIRouter, Query

from app.schemas.species import SpeciesResult, SpeciesSearchResponse
from app.services import species_client

router = APIRouter(prefix="/species", tags=["species"])


@router.get("/search", response_model=SpeciesSearchResponse)
async def search_species(
    q: str = Query(..., min_length=2, description="Scientific or common name prefix"),
    limit: int = Query(10, ge=1, le=30),
) -> SpeciesSearchResponse:
    """
    Search known species by name, for autocomplete on the sighting form.
    Lookup failures surface as 502 via SpeciesLookupError.
    """
    results = await species_client.search_species(q, limit=limit)
    return SpeciesSearchResponse(
        query=q,
        results=[SpeciesResult(**r) for r in results],
    )
