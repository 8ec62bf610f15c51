"""SpeakUp interview-practice backend."""
