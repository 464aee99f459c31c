"""Courts domain - Court catalogue and lifecycle"""

from .router import router

__all__ = ["router"]
