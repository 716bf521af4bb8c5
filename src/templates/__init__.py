"""Slide templates — Jinja2 markup plus the registry that dispatches to it.

- environment.py: the shared Jinja2 environment and its filters
- registry.py: slide kind -> renderer table, slide container wrapper
- slides.py: one renderer per slide kind
- code_highlight.py: token colouring for code slides
- html/: the templates themselves
"""
