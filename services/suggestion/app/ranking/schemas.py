from pydantic import BaseModel, ConfigDict, Field


class SuggestionCandidate(BaseModel):
    """One ranked account from the predictor; list order is rank order."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    user_id: str = Field(alias="userId", description="User id or public handle.")
    engagements: float = Field(default=0, description="Predicted engagement score.")
