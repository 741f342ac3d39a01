"""p5studio: p5.js sketch editor with live preview and AI code generation."""

__version__ = "0.1.0"
