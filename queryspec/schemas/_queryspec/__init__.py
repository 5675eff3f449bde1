from .queryspec_model import _QueryspecModel

__all__ = ["_QueryspecModel"]
