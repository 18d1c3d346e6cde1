"""
Authors feature: the relation posts point at.
"""
