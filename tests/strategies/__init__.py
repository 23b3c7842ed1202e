"""Hypothesis strategies for upload models."""
