"""Textual UI for termban."""

from termban.ui.app import BoardView, TermbanApp

__all__ = ["BoardView", "TermbanApp"]
