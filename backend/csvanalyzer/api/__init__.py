from .analyze import get_analyzer, router as analyze_router

__all__ = ["analyze_router", "get_analyzer"]
