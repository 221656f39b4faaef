"""Core gateway primitives: URL rewriting, event hub, proxy pipeline, errors."""
