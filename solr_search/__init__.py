"""
Faceted repository search over Solr.
"""

__version__ = "0.1.0"
