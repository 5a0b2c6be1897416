"""Drag-and-drop PNG trimmer: crops fully transparent borders off dropped images."""
