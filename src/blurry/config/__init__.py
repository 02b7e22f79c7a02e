"""Configuration for blurry."""
