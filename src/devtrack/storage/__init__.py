"""SQLite persistence for DevTrack records."""
