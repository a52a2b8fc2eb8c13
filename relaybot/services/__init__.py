"""Service layer: chat platform, transcription, completion and routing."""
