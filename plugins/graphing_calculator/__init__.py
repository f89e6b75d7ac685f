"""Graphing Calculator plugin manifest."""

manifest = {
    "title": "Graphing Calculator",
    "summary": "Compile single-variable expressions and stream cached samples for interactive plots.",
    "category": "General Utilities",
    "blueprint": "graphing_calculator",
}

__all__ = ["manifest"]
