"""pdimg verify - check a persistent data image the way a device would."""
from .logic import verify_bytes, verify_image

__all__ = ["verify_bytes", "verify_image"]
