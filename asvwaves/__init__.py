"""Triangle-mesh geometry, water-patch grids, tangent space and ocean tiles for wave simulation."""

__version__ = "0.1.0"

__all__ = ["geometry", "grid", "tangent_space", "ocean_tile"]