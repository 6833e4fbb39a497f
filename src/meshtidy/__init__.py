"""
meshtidy
========
Vertex-level maintenance of indexed triangle meshes: removal of unused and
duplicate vertices with consistent index remapping, bounding volumes and
UV-driven vertex transplantation.
"""
from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("meshtidy")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"
