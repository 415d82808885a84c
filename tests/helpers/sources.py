"""Search URLs shared by the source fixtures and the fake browser routes."""

MICROSOFT_URL = "https://jobs.careers.microsoft.com/global/en/search?q=frontend"
AMAZON_URL = "https://www.amazon.jobs/en/search?base_query=frontend"
GENERIC_URL = "https://x.com/search?q={keywords}"
