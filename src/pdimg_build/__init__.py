"""pdimg build - turn identity arguments into a persistent data image file."""
from .request import BuildRequest, BuildResult, build_image, collect_records

__version__ = "0.3.0"

__all__ = ["BuildRequest", "BuildResult", "build_image", "collect_records", "__version__"]
