"""
Wait-time estimation module.
"""
