"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Audio (headless clocked engine, httpx resource loader, WAV decoding)
"""
