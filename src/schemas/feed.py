from pydantic import BaseModel


class SourceIndex(BaseModel):
    message: str
    available_sources: list[str]
    instructions: str
