"""
Analytics period engine.
Resolves dashboard period selections and comparison baselines into concrete time ranges.
"""
