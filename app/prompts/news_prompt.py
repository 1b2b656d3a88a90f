NEWS_TASK = """
Find the latest agricultural news and updates for farmers in {location}.
Today is {current_date}.

**CRITICAL REQUIREMENT:**
You must fetch and generate valid news items for specific categories.

**SOURCES TO USE:**
1. **PIB (Press Information Bureau)**: {pib_block}
2. **Times of India/Local News**: {times_block}
3. Ministry of Agriculture (agricoop.nic.in)
4. IMD (Weather)

**CATEGORIES TO GENERATE (Must have 1-2 items per category if possible):**
1. **Weather**: [CRITICAL] Forecast for {location}. Rain, storm, or heat alerts.
2. **Accidents**: Any recent farming-related accidents.
3. **Technology**: New farm machines, apps, etc.
4. **Crops**: Sowing advice, pest alerts.
5. **Market**: Price trends.

Use exactly these five category names and nothing else.
"""

NEWS_PIB_FETCHED = "Use these fetched items: {summary}"
NEWS_PIB_SEARCH = "Search pib.gov.in for agriculture releases."
NEWS_TIMES_FETCHED = "Use these fetched items: {summary}"
NEWS_TIMES_SEARCH = "Search reliable news sources."

NEWS_SCHEMA = """{
  "news": [
    {
      "category": "Weather" | "Accidents" | "Technology" | "Crops" | "Market",
      "title": "Headline",
      "summary": "7-8 sentence detailed news summary.",
      "date": "Date/Time",
      "source": "Source Name",
      "link": "URL"
    }
  ]
}"""

NEWS_LANGUAGE_DIRECTIVE = (
    "STRICTLY output valid JSON string. Translate values to {language}. "
    "Keep the category values in English."
)
