"""
Shared constants for the project.

This module contains application-wide constants that should have a single source of truth.
"""

# User agent sent with every request unless overridden in config/crawler.yaml
DEFAULT_USER_AGENT = "mozilla/17.0"

# Search results page. The wrapped destination of each result link sits
# behind the redirect prefix as the `q` parameter.
DEFAULT_SEARCH_URL = "https://www.google.com/search"
DEFAULT_RESULT_CLASS = "ZINbbc xpd O9g5cc uUPGi"
DEFAULT_TITLE_TAG = "h3"
DEFAULT_SNIPPET_CLASS = "kCrYT"
DEFAULT_SNIPPET_INDEX = 1
DEFAULT_REDIRECT_PREFIX = "/url?q="

# Document links that never carry a scrapable product page
DEFAULT_EXCLUDED_EXTENSIONS = (".pdf",)

# Catalog layout: name, code, brand, then one column per retailer domain
NAME_COLUMN = 0
CODE_COLUMN = 1
BRAND_COLUMN = 2
FIRST_RETAILER_COLUMN = 3

# Suffix appended to the input workbook stem for the output workbook
DEFAULT_OUTPUT_SUFFIX = "-Crawler"
