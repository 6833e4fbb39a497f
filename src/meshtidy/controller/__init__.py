"""
Mesh Consistency Engine
=======================
The core algorithms operating on vertex sets.

Why is this file needed?
------------------------
1. Consistency: It keeps faces, strips and skin weights pointing at the right
   vertices while vertices are removed, merged or reordered.
2. Derived data: It computes bounds and invalidates stale skin partitions.
3. Correspondence: It rebuilds vertex order between two meshes by UV.

Note: This package should be pure Python/NumPy and should NOT import PySide6.
"""
