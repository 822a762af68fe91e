"""
Matching workflows with step-level progress events.

Modules
-------
base                 Workflow ABC, step / completion events.
module_to_countries  Module → compatible countries.
countries_to_module  Countries → recommended module(s) and combinations.
"""
