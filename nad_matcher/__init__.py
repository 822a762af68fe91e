"""
NAD Matcher: cellular module (NAD) / country frequency band compatibility.

Subpackages
-----------
matching        Band normalisation, per-country scoring, aggregation.
recommendations Module ranking and combination search.
catalog         JSON catalog loading and read-only repositories.
workflows       Module → countries and countries → module workflows.
"""

__version__ = "0.1.0"
