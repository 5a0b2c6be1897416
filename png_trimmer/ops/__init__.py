"""Use-case / operations layer.

Per-drop processing and the download trigger invoked by the UI. The trim
algorithm itself lives in `png_trimmer.trim`.
"""
