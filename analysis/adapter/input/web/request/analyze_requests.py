from pydantic import BaseModel, Field


class AnalyzeRequest(BaseModel):
    url: str | None = Field(default=None, description="YouTube watch URL containing a v= parameter")
