"""Artifact emitters folding over the resolved navigation tree."""
