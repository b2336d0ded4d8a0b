"""iNaturalist taxa client used to confirm species names and back the species search proxy."""

import logging

import httpx

from app.core.config import settings
from app.core.exceptions import SpeciesLookupError

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 10.0
AUTOCOMPLETE_LIMIT = 10


async def _call_inaturalist(endpoint: str, params: dict) -> dict:
    """Call the iNaturalist API with logging. Returns parsed JSON or raises SpeciesLookupError."""
    url = f"{settings.inaturalist_api_url.rstrip('/')}/{endpoint}"
    logger.info(f"Species lookup calling: {url} params={params}")

    try:
        async with httpx.AsyncClient(timeout=REQUEST_TIMEOUT) as client:
            response = await client.get(url, params=params)
    except httpx.HTTPError as e:
        logger.error(f"Species lookup request failed: {e}")
        raise SpeciesLookupError("Species lookup service unavailable") from e

    if response.status_code != 200:
        truncated_body = response.text[:500] if response.text else "(empty)"
        logger.error(f"Species lookup HTTP {response.status_code}: {truncated_body}")
        raise SpeciesLookupError(f"Species lookup failed with HTTP {response.status_code}")

    return response.json()


def _to_species(taxon: dict) -> dict:
    return {
        "taxon_id": taxon.get("id"),
        "scientific_name": taxon.get("name"),
        "common_name": taxon.get("preferred_common_name"),
        "rank": taxon.get("rank"),
        "iconic_taxon": taxon.get("iconic_taxon_name"),
    }


async def search_species(query: str, limit: int = AUTOCOMPLETE_LIMIT) -> list[dict]:
    """
    Search taxa by scientific or common name.

    Returns:
        List of dicts with taxon_id, scientific_name, common_name, rank, iconic_taxon.
    """
    data = await _call_inaturalist("taxa/autocomplete", {"q": query, "per_page": limit})
    return [_to_species(t) for t in data.get("results", [])]


async def is_known_species(species_name: str) -> bool:
    """True if some taxon's scientific or common name equals species_name (case-insensitive)."""
    wanted = species_name.strip().casefold()
    if not wanted:
        return False
    for species in await search_species(species_name.strip()):
        names = (species["scientific_name"], species["common_name"])
        if any(name and name.casefold() == wanted for name in names):
            logger.info(f"Species {species_name!r} matched taxon_id={species['taxon_id']}")
            return True
    logger.info(f"Species {species_name!r} not found")
    return False


class SpeciesValidator:
    """Species-validation collaborator handed to the submission service."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled

    async def validate(self, species_name: str) -> bool:
        if not self.enabled:
            return True
        return await is_known_species(species_name)


def get_species_validator() -> SpeciesValidator:
    return SpeciesValidator(enabled=settings.species_validation_enabled)
