"""Run one local recording through intake, transcription and assessment.

Usage: python scripts/score_sample.py path/to/answer.wav
"""

import asyncio
import json
import os
import sys

# Add project root to path so we can import speakup
sys.path.append(os.getcwd())

from speakup.config.settings import settings
from speakup.pipelines.turn import (
    AudioUpload,
    TurnPipelineError,
    assess_answer,
    transcribe_answer,
    validate_upload,
)
from speakup.services import AssemblyAITranscriber, FfmpegTranscoder


async def main():
    if len(sys.argv) < 2:
        print("Usage: python scripts/score_sample.py path/to/answer.wav|webm")
        return

    file_path = sys.argv[1]
    if not os.path.exists(file_path):
        print(f"File '{file_path}' not found.")
        return

    with open(file_path, "rb") as f:
        audio_bytes = f.read()

    content_type = "audio/webm" if file_path.lower().endswith(".webm") else "audio/wav"
    upload = AudioUpload(data=audio_bytes, filename=os.path.basename(file_path), content_type=content_type)

    assessor = None
    if settings.azure_speech.configured:
        from speakup.services.pronunciation import AzurePronunciationAssessor

        assessor = AzurePronunciationAssessor(settings.azure_speech)

    try:
        audio = await validate_upload(
            upload,
            config=settings.pipeline,
            transcoder=FfmpegTranscoder(settings.pipeline.ffmpeg_binary),
        )
        print(f"Validated {len(audio.data)} bytes (transcoded={audio.transcoded})")

        transcript = await transcribe_answer(AssemblyAITranscriber(settings.assemblyai), audio)
        print("\n--- Transcript ---")
        print(transcript or "(no speech detected)")

        if transcript:
            assessment = await assess_answer(assessor, audio, transcript)
            print("\n--- Assessment ---")
            if assessment is None:
                print("(not available)")
            else:
                print(json.dumps(assessment.model_dump(exclude={"raw_json"}), indent=2))
    except TurnPipelineError as e:
        print(f"\n{type(e).__name__} ({e.status_code}): {e.message}")


if __name__ == "__main__":
    asyncio.run(main())
