from pydantic import BaseModel

from app.schemas.trip import IdeaKind


class IdeaCreate(BaseModel):
    kind: IdeaKind = IdeaKind.idea
    text: str = ""


class IdeaUpdate(BaseModel):
    text: str
