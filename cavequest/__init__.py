"""A small side-scrolling cave platformer driven by Tiled TMX maps."""

__version__ = "0.1.0"
__all__ = ["game", "gameobject", "world"]