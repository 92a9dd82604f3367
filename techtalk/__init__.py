"""TechTalkZA blog API."""
