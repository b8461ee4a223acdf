"""PaperLens — AI research-paper workspace."""
