"""Headless Drawlio protocol client."""
