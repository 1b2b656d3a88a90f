from typing import List

from pydantic import AliasChoices, BaseModel, Field


class SchemeItem(BaseModel):
    name: str = Field(description="Scheme name.")
    description: str = Field(description="Simple explanation of the scheme.")
    benefits: List[str] = Field(default_factory=list)
    steps_to_claim: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("stepsToClaim", "steps_to_claim"),
        serialization_alias="stepsToClaim",
    )
    official_link: str = Field(
        default="",
        validation_alias=AliasChoices("officialLink", "official_link"),
        serialization_alias="officialLink",
    )


class SchemeResponse(BaseModel):
    schemes: List[SchemeItem] = Field(default_factory=list)
