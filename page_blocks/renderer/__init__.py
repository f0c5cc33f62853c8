from .html import render_block, render_blocks, render_page

__all__ = ["render_block", "render_blocks", "render_page"]
