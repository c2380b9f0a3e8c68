"""Rewriting of file-maps and npm manifests."""
