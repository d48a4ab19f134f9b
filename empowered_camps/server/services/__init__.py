"""Business services behind the API endpoints."""
