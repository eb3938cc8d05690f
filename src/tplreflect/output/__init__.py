"""Output formatting: text tables, JSON envelopes, Mermaid."""
