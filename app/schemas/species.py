"""Schemas for the species lookup proxy."""

from typing import Optional

from pydantic import BaseModel


class SpeciesResult(BaseModel):
    taxon_id: Optional[int] = None
    scientific_name: Optional[str] = None
    common_name: Optional[str] = None
    rank: Optional[str] = None
    iconic_taxon: Optional[str] = None


class SpeciesSearchResponse(BaseModel):
    query: str
    results: list[SpeciesResult]
