"""
Typed access to the host store and the clipboard abstraction.
"""
