"""
Matching core: compares module bands against country bands.

Modules
-------
bands      : GSM band normalisation + band frequency reference.
scorer     : score_technology() + score_module_country() + weighted overall
             percentage.  Pure functions, no I/O.
aggregator : score_module_countries() + find_compatible(): one module
             against many countries.
"""
