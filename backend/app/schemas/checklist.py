from pydantic import BaseModel


class ChecklistItemCreate(BaseModel):
    text: str = ""


class ChecklistItemUpdate(BaseModel):
    text: str
