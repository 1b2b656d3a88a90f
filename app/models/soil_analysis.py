from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field

ParameterStatus = Literal[
    "Low", "Medium", "High", "Normal", "Sufficient", "Deficient", "Unknown"
]


class SoilParameter(BaseModel):
    """A single measured soil parameter with its agronomic reading."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    name: str = Field(description="Parameter name as printed on the report.")
    value: str = Field(description="Measured value.")
    unit: str = Field(default="", description="Unit of the measured value.")
    status: ParameterStatus = Field(description="Rating of the measured value.")
    effect: str = Field(description="Effect of this level on the crop.")
    recommendation: str = Field(description="Corrective action for the farmer.")


class CropSuggestion(BaseModel):
    crop: str
    reasoning: str


class DiseasePrediction(BaseModel):
    disease_name: str
    likelihood_reason: str
    preventative_measures: List[str] = Field(default_factory=list)


class FertilizerRecommendations(BaseModel):
    chemical: List[str] = Field(
        default_factory=list, description="Market brand names of chemical fertilizers."
    )
    organic: List[str] = Field(default_factory=list, description="Organic options.")


class NarrativeBlock(BaseModel):
    soil_condition_summary: str = Field(description="How the soil is.")
    weather_location_analysis: str = Field(description="Weather and location check.")
    soil_maintenance: List[str] = Field(default_factory=list)
    production_increase_tips: List[str] = Field(default_factory=list)
    fertilizer_recommendations: FertilizerRecommendations = Field(
        default_factory=FertilizerRecommendations
    )
    irrigation_requirements: str = Field(default="")
    crop_suggestions: List[CropSuggestion] = Field(default_factory=list)
    disease_prediction: List[DiseasePrediction] = Field(default_factory=list)


class ParameterTable(BaseModel):
    ph: SoilParameter
    ec: SoilParameter
    oc: SoilParameter
    nitrogen: SoilParameter
    phosphorus: SoilParameter
    potassium: SoilParameter
    secondary: List[SoilParameter] = Field(default_factory=list)
    micronutrients: List[SoilParameter] = Field(default_factory=list)


class SoilAnalysis(BaseModel):
    """Agronomic analysis of an uploaded soil test report."""

    extracted_location: str = Field(
        description="Village, District, State as read from the report."
    )
    narrative: NarrativeBlock
    raw_data: ParameterTable
