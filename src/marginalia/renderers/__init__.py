"""Renderers for marginalia annotation tokens.

Available:
- html: fixed span wrappers registered as markdown-it render rules
"""

from marginalia.renderers.html import install_render_rules, render_rules

__all__ = ["install_render_rules", "render_rules"]
