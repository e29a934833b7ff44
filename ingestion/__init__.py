"""
Data Ingestion Module

Handles loading and normalizing daily return series from CSV sources:
- Candidate source cascade (HTTP or local files)
- Date and numeric normalization
- Inline sample fallback when no source is reachable
"""

__version__ = "0.1.0"
