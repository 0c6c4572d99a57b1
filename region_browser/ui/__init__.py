"""Tkinter presentation for the region browser."""
