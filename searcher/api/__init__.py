"""HTTP surface for the searcher service."""
