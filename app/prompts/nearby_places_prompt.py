NEARBY_PLACES_TASK = """
Find "Soil Testing Laboratories" and "Agriculture Service Centers (Krushi Seva Kendra)" near: {location}.
Return a list of top 6 relevant results with real addresses.
Use "Lab" as the type for laboratories and "Krushi Kendra" for service centers.
"""

NEARBY_PLACES_SCHEMA = """[
  {
    "name": "Name",
    "address": "Full Address",
    "type": "Lab" | "Krushi Kendra",
    "rating": "4.5",
    "distance": "Distance"
  }
]"""

NEARBY_PLACES_LANGUAGE_DIRECTIVE = (
    "STRICTLY output a valid JSON array. "
    "Write names and addresses in {language}, keep the type values in English."
)
