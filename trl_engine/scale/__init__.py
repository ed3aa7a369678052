"""
scale/ - TRL Maturity Scale Model

Modules:
    levels.py           - NASA TRL reference table (27 sub-levels)
    maturity_scale.py   - Numeric encoding, navigation, durations, lookups
    domain_provider.py  - Domain evidence / exit-criteria providers
"""
