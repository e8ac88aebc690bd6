"""HTTP routes for the AI governance API."""
