"""Bundled YAML presets: default config, categories and attributes."""
