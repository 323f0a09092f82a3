"""Spreadsheet sources and decoding."""
