"""HTTP API for Sparkle Studio."""
