"""Configuration, platform paths and logging setup."""
