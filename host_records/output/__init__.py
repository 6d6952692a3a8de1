"""Output formatting module."""

from .render import render_apps, render_credentials, render_credentials_json, render_json, render_table

__all__ = [
    "render_apps",
    "render_credentials",
    "render_credentials_json",
    "render_json",
    "render_table",
]
