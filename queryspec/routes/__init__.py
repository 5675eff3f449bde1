from .dependencies import specification_request
from .handlers import register_specification_handlers

__all__ = ["register_specification_handlers", "specification_request"]
