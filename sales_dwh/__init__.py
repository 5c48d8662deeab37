"""
Sales Data Warehouse Analytics

Gold-layer reporting over the sales star schema.
"""

__version__ = "1.0.0"
