"""Azure Speech pronunciation assessment helpers."""

from __future__ import annotations

import json
import logging
import os
import tempfile

import azure.cognitiveservices.speech as speechsdk
from fastapi.concurrency import run_in_threadpool

from speakup.config.settings import AzureSpeechConfig
from speakup.domain.models import PronunciationAssessment
from speakup.services.errors import AssessmentUnavailable, ServiceConfigurationError

logger = logging.getLogger(__name__)


class AzurePronunciationAssessor:
    """Score a WAV answer against its own transcript."""

    def __init__(self, config: AzureSpeechConfig) -> None:
        if not config.configured:
            raise ServiceConfigurationError("Azure Speech key/region are not configured.")
        self._config = config
        self._grading_system = getattr(
            speechsdk.PronunciationAssessmentGradingSystem, config.grading_system
        )
        self._granularity = getattr(
            speechsdk.PronunciationAssessmentGranularity, config.granularity
        )

    async def assess(self, wav_bytes: bytes, reference_text: str) -> PronunciationAssessment:
        return await run_in_threadpool(self._assess_sync, wav_bytes, reference_text)

    def _assess_sync(self, wav_bytes: bytes, reference_text: str) -> PronunciationAssessment:
        with tempfile.NamedTemporaryFile(delete=False, suffix=".wav") as tmp_file:
            tmp_file.write(wav_bytes)
            tmp_path = tmp_file.name

        try:
            speech_config = speechsdk.SpeechConfig(
                subscription=self._config.subscription_key.get_secret_value(),
                region=self._config.region,
            )
            speech_config.speech_recognition_language = self._config.language
            audio_config = speechsdk.audio.AudioConfig(filename=tmp_path)

            pronunciation_config = speechsdk.PronunciationAssessmentConfig(
                reference_text=reference_text,
                grading_system=self._grading_system,
                granularity=self._granularity,
                enable_miscue=self._config.enable_miscue,
            )
            recognizer = speechsdk.SpeechRecognizer(
                speech_config=speech_config,
                audio_config=audio_config,
            )
            pronunciation_config.apply_to(recognizer)

            result = recognizer.recognize_once()
            return self._to_assessment(result)
        except AssessmentUnavailable:
            raise
        except Exception as exc:  # SDK surfaces transport errors as bare RuntimeErrors
            raise AssessmentUnavailable(f"Pronunciation assessment failed: {exc}") from exc
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

    @staticmethod
    def _to_assessment(result: "speechsdk.SpeechRecognitionResult") -> PronunciationAssessment:
        if result.reason == speechsdk.ResultReason.NoMatch:
            raise AssessmentUnavailable("No speech could be recognized for assessment.")
        if result.reason == speechsdk.ResultReason.Canceled:
            details = result.cancellation_details
            raise AssessmentUnavailable(
                f"Pronunciation assessment canceled: {details.reason} {details.error_details or ''}".strip()
            )
        if result.reason != speechsdk.ResultReason.RecognizedSpeech:
            raise AssessmentUnavailable(f"Unexpected recognition result: {result.reason}")

        scores = speechsdk.PronunciationAssessmentResult(result)
        raw = result.properties.get_property(
            speechsdk.PropertyId.SpeechServiceResponse_JsonResult, "{}"
        )
        try:
            raw_json = json.loads(raw or "{}")
        except json.JSONDecodeError:
            logger.warning("Pronunciation detail payload was not valid JSON")
            raw_json = {}

        return PronunciationAssessment(
            recognized_text=result.text,
            accuracy_score=scores.accuracy_score,
            pronunciation_score=scores.pronunciation_score,
            fluency_score=scores.fluency_score,
            completeness_score=scores.completeness_score,
            raw_json=raw_json,
        )


__all__ = ["AzurePronunciationAssessor"]
