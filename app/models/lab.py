from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

LabType = Literal["Lab", "Krushi Kendra"]


class LabItem(BaseModel):
    """A soil testing lab or Krushi Seva Kendra near the farmer."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    name: str
    address: str
    type: LabType
    rating: Optional[str] = None
    distance: Optional[str] = None
