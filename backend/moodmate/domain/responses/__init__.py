from .renderer import render, parse_structured, strip_code_fence, canned_reply

__all__ = ["render", "parse_structured", "strip_code_fence", "canned_reply"]
