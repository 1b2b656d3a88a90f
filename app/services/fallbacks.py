"""Substitute payloads served when a model call or its parsing fails.

Every function here is total: it never raises for any input.
"""

from typing import List, Optional

from app.models.lab import LabItem
from app.models.news import NewsItem, NewsResponse
from app.models.scheme import SchemeItem, SchemeResponse
from app.services.prompt_builder import news_date

CHAT_FALLBACK_TEXT = "Network error. Please try again."
DEFAULT_AREA_NAME = "Your Area"

LAB_NAMES = [
    "District Soil Testing Lab",
    "Green Leaf Agrotech",
    "National Agriculture Lab",
    "Rural Soil Health Centre",
    "Eco-Farm Testing Services",
    "State Agriculture Dept Lab",
    "Modern Soil Analysis Bureau",
    "Harvest Care Lab",
    "Earth Science Testing",
]

KENDRA_NAMES = [
    "Kisan Seva Kendra",
    "Agri Inputs Depot",
    "Farmers Choice Center",
    "Village Agro Mart",
    "Organic Farming Weekly",
    "Seeds & Fertilizer Hub",
    "Jay Jawan Krushi Kendra",
    "Samruddhi Agro Center",
    "Green Field Supplies",
]

AREAS = [
    "Market Yard",
    "Industrial Estate",
    "Main Road",
    "Near Bus Stand",
    "Railway Station Road",
    "Administrative Complex",
    "Old City Center",
    "Highway Junction",
]

LABS_PER_FALLBACK = 3
KENDRAS_PER_FALLBACK = 3


def news_fallback(current_date: Optional[str] = None) -> NewsResponse:
    return NewsResponse(
        news=[
            NewsItem(
                category="Weather",
                title="Weather Update Service Unavailable",
                summary=(
                    "We could not fetch the live weather at this moment. "
                    "Please check local TV or Radio."
                ),
                date=current_date or news_date(),
                source="System",
                link="",
            )
        ],
        sources=[],
    )


def schemes_fallback() -> SchemeResponse:
    return SchemeResponse(
        schemes=[
            SchemeItem(
                name="PM-Kisan Samman Nidhi",
                description=(
                    "PM-Kisan gives small cash support directly to eligible landholding farmers. "
                    "It helps meet basic cultivation and household expenses. "
                    "Payments are transferred to the farmer's bank account in 3 instalments per year. "
                    "Registration is simple and can be done through local CSC or online. "
                    "This support improves cash flow during sowing and harvesting seasons."
                ),
                benefits=[
                    "Direct cash into farmer's bank account for immediate use",
                    "Helps cover input costs like seeds and fertiliser",
                    "Reduces dependency on informal loans with high interest",
                    "Improves household financial stability during lean months",
                    "Easy access through local Common Service Centres (CSCs)",
                ],
                steps_to_claim=[
                    "Collect Aadhaar, land record (khata), and bank details",
                    "Visit your nearest Common Service Centre (CSC) or local agriculture office",
                    "Fill the PM-Kisan registration form and submit required documents",
                    "Wait for verification (usually a few weeks) and track status online",
                    "Receive instalments directly in your bank account once approved",
                ],
                official_link="https://pmkisan.gov.in",
            ),
            SchemeItem(
                name="Pradhan Mantri Fasal Bima Yojana (PMFBY)",
                description=(
                    "PMFBY provides affordable crop insurance against yield losses from natural calamities. "
                    "The scheme protects farmers from income loss due to weather, pests, or disease. "
                    "Premium rates are subsidised and depend on the crop and season. "
                    "Claims are processed after yield assessment or notified losses. "
                    "This insurance helps farmers recover and replant without severe financial strain."
                ),
                benefits=[
                    "Financial protection against crop loss due to natural calamities",
                    "Low, subsidised premium rates for farmers",
                    "Quick assessment and compensation process for many events",
                    "Encourages investment in better inputs and technology",
                    "Available through banks and authorised insurance providers",
                ],
                steps_to_claim=[
                    "Keep records of sowing dates and crop type",
                    "Register for PMFBY at your bank branch, insurance office, or CSC before the cut-off",
                    "Pay the applicable premium (often partially subsidised)",
                    "In case of loss, inform the insurer/local authority immediately and provide evidence",
                    "Complete required damage assessment steps and submit documents for claim settlement",
                ],
                official_link="https://pmfby.gov.in",
            ),
            SchemeItem(
                name="Soil Health Card Scheme",
                description=(
                    "The Soil Health Card tells you the nutrient status of your field. "
                    "Government labs test your soil sample free of cost. "
                    "The card lists the fertiliser dose suited to your crop. "
                    "Using it avoids spending on fertiliser your soil does not need. "
                    "Soil is tested again every two years to track changes."
                ),
                benefits=[
                    "Free soil testing at government laboratories",
                    "Crop-wise fertiliser advice for your own field",
                    "Lower fertiliser cost by avoiding overuse",
                    "Better yield through balanced nutrition",
                    "Record of soil health over the years",
                ],
                steps_to_claim=[
                    "Contact your village agriculture officer or Krushi Seva Kendra",
                    "Give a soil sample collected as advised by the officer",
                    "Share your name, Aadhaar and land details for registration",
                    "Wait for the lab to test the sample",
                    "Collect the card or download it from the Soil Health Card portal",
                ],
                official_link="https://soilhealth.dac.gov.in",
            ),
            SchemeItem(
                name="Kisan Credit Card (KCC)",
                description=(
                    "The Kisan Credit Card gives farmers short-term loans for farming needs. "
                    "You can buy seeds, fertiliser and pesticides when you need them. "
                    "Interest is low and timely repayment earns an extra subsidy. "
                    "The card also covers animal husbandry and fisheries needs. "
                    "Banks issue the card on the basis of your land and crops."
                ),
                benefits=[
                    "Low-interest crop loans from banks",
                    "Interest subvention for prompt repayment",
                    "Flexible withdrawal as per crop needs",
                    "Covers allied activities like dairy and fisheries",
                    "Reduces dependence on money lenders",
                ],
                steps_to_claim=[
                    "Visit your bank branch or apply through the PM-Kisan portal",
                    "Fill the one-page KCC application form",
                    "Attach land records, Aadhaar and a photograph",
                    "Bank verifies your land and crop details",
                    "Receive the card and loan limit in your account",
                ],
                official_link="https://pmkisan.gov.in",
            ),
            SchemeItem(
                name="e-NAM (National Agriculture Market)",
                description=(
                    "e-NAM is an online market that links mandis across India. "
                    "You can sell your produce to buyers from other markets. "
                    "Prices are shown openly so you get a fair rate. "
                    "Payment is made online to your bank account. "
                    "Registration is done at your nearest e-NAM mandi."
                ),
                benefits=[
                    "Access to more buyers across states",
                    "Transparent price discovery",
                    "Online payment directly to bank account",
                    "Quality testing of produce at the mandi",
                    "Less dependence on middlemen",
                ],
                steps_to_claim=[
                    "Visit the nearest e-NAM mandi or the e-NAM portal",
                    "Register with Aadhaar, bank details and mobile number",
                    "Bring your produce to the mandi for quality assaying",
                    "Accept the best online bid for your lot",
                    "Receive payment in your bank account",
                ],
                official_link="https://enam.gov.in",
            ),
        ]
    )


def location_seed(location: str) -> int:
    return sum(ord(char) for char in location)


def nearby_places_fallback(location: Optional[str]) -> List[LabItem]:
    """Plausible labs and kendras for ``location``, stable per location string."""
    location_name = location if isinstance(location, str) and location else DEFAULT_AREA_NAME
    seed = location_seed(location_name)

    results: List[LabItem] = []
    for i in range(LABS_PER_FALLBACK):
        name_idx = (seed + i) % len(LAB_NAMES)
        area_idx = (seed + i * 2) % len(AREAS)
        distance = ((seed + i) % 80) / 10 + 0.5
        results.append(
            LabItem(
                name=f"{LAB_NAMES[name_idx]}, {location_name}",
                address=f"{AREAS[area_idx]}, {location_name}",
                type="Lab",
                rating=f"{4 + (distance % 1):.1f}",
                distance=f"{distance:.1f} km",
            )
        )

    for i in range(KENDRAS_PER_FALLBACK):
        name_idx = (seed + i + 5) % len(KENDRA_NAMES)
        area_idx = (seed + i * 3 + 1) % len(AREAS)
        distance = ((seed + i * 2) % 50) / 10 + 0.2
        results.append(
            LabItem(
                name=KENDRA_NAMES[name_idx],
                address=f"{AREAS[area_idx]}, {location_name}",
                type="Krushi Kendra",
                rating=f"{3.8 + (distance % 1.2):.1f}",
                distance=f"{distance:.1f} km",
            )
        )

    return results
