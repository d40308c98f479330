# Routers package for the athlete intake service

from . import pages, submit, uploads

__all__ = [
    "pages",
    "submit",
    "uploads",
]
