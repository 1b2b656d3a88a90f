SOIL_ANALYSIS_TASK = """
Analyze the provided Soil Test Report (Image or PDF).
Context: Current Date: {current_date}

You are an agronomist advising a small Indian farmer. Read every parameter printed on the report.
- Use the report's village/district/state for extracted_location. If it is missing, write "Unknown".
- Rate each parameter with exactly one status: Low, Medium, High, Normal, Sufficient, Deficient or Unknown.
- For chemical fertilizers recommend specific market brand names available in India, not generic chemical names.
- Suggest crops suited to this soil and the current season, and predict likely diseases with preventive measures.
- Use the current date and the location to comment on the season and weather.
"""

SOIL_ANALYSIS_SCHEMA = """{
  "extracted_location": "Village, District, State",
  "narrative": {
    "soil_condition_summary": "Summary of soil health...",
    "weather_location_analysis": "Weather context...",
    "soil_maintenance": ["Tip 1", "Tip 2"],
    "production_increase_tips": ["Tip 1", "Tip 2"],
    "fertilizer_recommendations": {
      "chemical": ["Item 1"],
      "organic": ["Item 2"]
    },
    "irrigation_requirements": "Requirements...",
    "crop_suggestions": [
      { "crop": "Name", "reasoning": "Reason..." }
    ],
    "disease_prediction": [
      { "disease_name": "Name", "likelihood_reason": "Reason...", "preventative_measures": ["Measure 1"] }
    ]
  },
  "raw_data": {
    "ph": { "name": "pH", "value": "7.0", "unit": "", "status": "Normal", "effect": "...", "recommendation": "..." },
    "ec": { "name": "EC", "value": "...", "unit": "dS/m", "status": "...", "effect": "...", "recommendation": "..." },
    "oc": { "name": "Organic Carbon", "value": "...", "unit": "%", "status": "...", "effect": "...", "recommendation": "..." },
    "nitrogen": { "name": "Nitrogen", "value": "...", "unit": "kg/ha", "status": "...", "effect": "...", "recommendation": "..." },
    "phosphorus": { "name": "Phosphorus", "value": "...", "unit": "kg/ha", "status": "...", "effect": "...", "recommendation": "..." },
    "potassium": { "name": "Potassium", "value": "...", "unit": "kg/ha", "status": "...", "effect": "...", "recommendation": "..." },
    "secondary": [ { "name": "Sulphur", "value": "...", "unit": "ppm", "status": "...", "effect": "...", "recommendation": "..." } ],
    "micronutrients": [ { "name": "Zinc", "value": "...", "unit": "ppm", "status": "...", "effect": "...", "recommendation": "..." } ]
  }
}"""

SOIL_ANALYSIS_LANGUAGE_DIRECTIVE = (
    "Translate all narrative content to {language}. "
    "Keep the JSON keys and the status values in English."
)
