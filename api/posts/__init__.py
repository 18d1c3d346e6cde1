"""
Posts feature: CRUD over posts with author expansion.
"""
