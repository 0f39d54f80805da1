"""
Retail Price Crawler

Finds the lowest current retail price of catalog products across a set of
retailer websites and merges the prices back into the catalog workbook.

Modules:
    models      - Data models (Product, PriceQuote, Catalog, SyncReport)
    common      - Shared utilities (config loader, logging, HTTP fetcher)
    discovery   - Search-engine discovery of candidate product pages
    extraction  - Per-retailer price extraction rules and price parsing
    resolution  - Candidate fan-out and minimum-price reduction
    catalog     - Workbook I/O and the catalog sync engine
"""
