"""
Multi-Store Dashboard Application

Connects one or more Shopify stores and serves:
- Shop information, product and order tables per store
- Aggregated totals across all connected stores
- Store comparison series for analytics
"""

__version__ = "1.0.0"
