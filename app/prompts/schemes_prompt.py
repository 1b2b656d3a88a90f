SCHEMES_TASK = """
Find detailed Government Agricultural Schemes for farmers in {location}.

You MUST prioritize data from these specific official portals:
1. https://kisanportal.org/
2. https://pmkisan.gov.in
3. https://agricoop.nic.in
4. https://www.mygov.in
5. https://doordarshan.gov.in/ddkisan

Select 30-40 major active and beneficial government schemes for farmers from these sources.

For EACH scheme, generate:
1. A detailed explanation (approximately 5 short lines/sentences) written in very simple, easy-to-understand language. Keep each sentence short and actionable.
2. At least 5 specific benefits (bullet points) that explain why the scheme helps farmers in practical terms.
3. A clear, detailed, step-by-step application process using short numbered steps. Make steps easy to follow for farmers with limited digital experience (e.g., include visits to local CSC, required documents, and alternatives).
"""

SCHEMES_SCHEMA = """{
  "schemes": [
    {
      "name": "Scheme Name",
      "description": "Detailed 5-line explanation of the scheme...",
      "benefits": ["Benefit 1", "Benefit 2", "Benefit 3", "Benefit 4", "Benefit 5"],
      "stepsToClaim": ["Step 1", "Step 2", "Step 3", "Step 4", "Step 5"],
      "officialLink": "Official URL from the grounding sources"
    }
  ]
}"""

SCHEMES_LANGUAGE_DIRECTIVE = (
    "STRICTLY output the response in valid JSON format ONLY. "
    "Translate all content to {language}."
)
