#!/usr/bin/env python3
"""
Run script for the SpeakUp backend
"""
import uvicorn

from speakup.config.settings import settings
from speakup.main import app

if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port, reload=settings.debug)
