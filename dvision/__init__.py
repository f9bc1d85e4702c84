"""Computer vision utilities: BRIEF descriptors, patch extraction, RANSAC
fundamental matrix and homography solvers, and reconstruction file formats."""

__version__ = "0.1.0"

__all__ = [
    "errors",
    "mathfuncs",
    "stl",
    "random",
    "imagefunctions",
    "brief",
    "fsolver",
    "hsolver",
    "bundlecamera",
    "plyfile",
    "pmvscamera",
    "patchfile",
    "pixelpointfile",
    "matches",
]