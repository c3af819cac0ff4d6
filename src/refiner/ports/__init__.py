from .embedder import Embedder, Vector
from .image_generator import ImageGenerator
from .keyword_extractor import KeywordExtractor

__all__ = [
    "Embedder",
    "ImageGenerator",
    "KeywordExtractor",
    "Vector",
]
