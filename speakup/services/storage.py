"""S3 storage for uploaded answer audio."""

from __future__ import annotations

import time
from typing import Any, Callable

from botocore.exceptions import BotoCoreError, ClientError
from fastapi.concurrency import run_in_threadpool

from speakup.config.settings import S3Config
from speakup.services.aws import create_boto3_client
from speakup.services.errors import ServiceConfigurationError


class StorageError(RuntimeError):
    """Raised when S3 asset persistence fails."""


def _object_url(bucket: str, region: str, key: str) -> str:
    if region == "us-east-1":
        return f"https://{bucket}.s3.amazonaws.com/{key}"
    return f"https://{bucket}.s3.{region}.amazonaws.com/{key}"


def answer_object_name(user_id: int, now: Callable[[], float] = time.time) -> str:
    """Name blobs ``<user_id>/audio<epoch-millis>.wav``."""

    return f"{user_id}/audio{int(now() * 1000)}.wav"


class S3AnswerStorage:
    """Upload answer recordings to a bucket and hand back their URL."""

    def __init__(
        self,
        config: S3Config,
        *,
        client: Any | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not config.bucket_name:
            raise ServiceConfigurationError("S3 bucket name is not configured.")
        self._bucket = config.bucket_name
        self._region = config.region
        self._prefix = config.key_prefix
        self._clock = clock
        self._client = client or create_boto3_client(
            "s3",
            region_name=config.region,
            aws_access_key_id=config.access_key,
            aws_secret_access_key=config.secret_key,
        )

    async def upload_answer_audio(
        self,
        user_id: int,
        audio_bytes: bytes,
        *,
        content_type: str = "audio/wav",
    ) -> str:
        """Upload the canonical WAV and return its public URL."""

        if not audio_bytes:
            raise StorageError("Audio payload for upload was empty.")

        object_key = f"{self._prefix}{answer_object_name(user_id, self._clock)}"
        try:
            await run_in_threadpool(
                self._client.put_object,
                Bucket=self._bucket,
                Key=object_key,
                Body=audio_bytes,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"Failed to upload answer audio: {exc}") from exc

        return _object_url(self._bucket, self._region, object_key)


__all__ = ["S3AnswerStorage", "StorageError", "answer_object_name"]
