from .builder import build_prompt, render_transcript

__all__ = ["build_prompt", "render_transcript"]
