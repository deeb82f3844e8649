"""Life Tracker: habit and measurement tracking API backed by JSON files."""
