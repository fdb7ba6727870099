"""Pydantic request/response models for API endpoints."""

from pydantic import BaseModel


class UpdateValues(BaseModel):
    values: dict[str, str]


class CellBody(BaseModel):
    row: int
    col: int


class CharacterBody(BaseModel):
    type: str


class DescriptionBody(BaseModel):
    text: str


class ScenarioBody(BaseModel):
    key: str
