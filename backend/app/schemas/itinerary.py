from pydantic import BaseModel


class DayCreate(BaseModel):
    title: str = "New day"


class DayUpdate(BaseModel):
    title: str


class ActivityCreate(BaseModel):
    time: str = "12:00"
    text: str = ""


class ActivityUpdate(BaseModel):
    time: str | None = None
    text: str | None = None
