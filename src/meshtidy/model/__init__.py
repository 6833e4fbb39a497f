"""
The MODEL layer contains pure data structures.
It has NO knowledge of the algorithms (controller) or the operator surface (app).
It deals with vertex arrays, index structures, the block store and I/O.
"""
