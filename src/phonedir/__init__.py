"""phonedir - searchable phone directory built from an irregular spreadsheet."""
