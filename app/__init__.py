"""TMDB to Webflow movie sync package."""
