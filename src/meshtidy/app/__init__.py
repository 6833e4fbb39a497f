"""
Operator surface: the operation registry, execute functions and the Qt clipboard.
"""
