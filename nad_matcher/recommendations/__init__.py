"""
Recommendation engine: turns band matches into ranked module
recommendations with human-readable reasons.

Modules
-------
ranker       : recommend_modules() + build_recommendation() +
               build_recommendation_reason() + rank_recommendations().
combinations : group_modules_by_region() + evaluate_combination() +
               find_combinations(): bounded multi-module search.
"""
