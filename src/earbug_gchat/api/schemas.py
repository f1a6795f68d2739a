from pydantic import BaseModel, Field


class SummaryRequest(BaseModel):

    user: str = Field(..., min_length=1, description="Earbug user, also the object name prefix in the bucket")
