"""Settings for the SpeakUp backend."""
