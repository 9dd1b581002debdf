"""Fortune background video generation using Google's Veo API.

Veo is a PAID service: keys from free-tier projects are rejected. The
generated clip is a 9:16 vertical background (falling golden zodiac statues
over a space backdrop) meant to be captioned with the script in CapCut.
"""

import logging
import re
import time
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

import requests

from src.config import Config, config as default_config
from src.services.errors import (
    CredentialInvalid,
    CredentialMissing,
    FetchFailure,
    TimeoutExceeded,
    UriMissing,
    is_invalid_key_error,
)

logger = logging.getLogger(__name__)


# Any of these in the script switches the focal statue from toad to pig
PIG_KEYWORDS = ("돼지", "돈돼지", "복돼지")

PIG_MOTIF = "a massive, glowing Golden Fortune Pig statue at the bottom center"
TOAD_MOTIF = "a majestic, ruby-eyed Golden Fortune Toad statue at the bottom center"

VIDEO_PROMPT_TEMPLATE = """
High-quality 9:16 vertical cinematic video.
SCENE: A mysterious deep space universe background with glowing blue and purple nebulas.
MOTION: Diverse golden statues of the 12 Chinese zodiac animals (Dragon, Tiger, Snake, etc.) are falling gracefully like golden rain from the top to the bottom of the screen.
SUBJECT: At the bottom, {focal_object} is sitting on a pile of gold coins, glowing intensely.
VISUAL STYLE: Photorealistic 3D animation, golden glowing light, luxury atmosphere, sparkles and particles.
NO TEXT: Ensure no text is visible in the video.
"""


def select_focal_motif(script: str) -> str:
    """Pick the pig statue when the script talks about pigs, else the toad."""
    compact = re.sub(r"\s", "", script or "")
    if any(keyword in compact for keyword in PIG_KEYWORDS):
        return PIG_MOTIF
    return TOAD_MOTIF


def build_video_prompt(script: str) -> str:
    return VIDEO_PROMPT_TEMPLATE.format(focal_object=select_focal_motif(script))


class FortuneVideoGenerator:
    """Generate the zodiac background video with Veo.

    Flow: submit the job, poll the long-running operation every
    ``poll_interval`` seconds (at most ``max_polls`` times), then download the
    finished clip with the API key appended as a query parameter.
    """

    def __init__(
        self,
        api_key_provider: Callable[[], Optional[str]],
        config: Optional[Config] = None,
        client_factory: Optional[Callable[[str], object]] = None,
        http_get: Optional[Callable[..., requests.Response]] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config or default_config
        self.api_key_provider = api_key_provider
        self._client_factory = client_factory
        self._http_get = http_get or requests.get
        self._sleep = sleep
        self._client = None
        self._client_key = None

    def _get_client(self, api_key: str):
        """Lazy load Google GenAI client, rebuilt when the key changes."""
        if self._client is None or self._client_key != api_key:
            if self._client_factory is not None:
                self._client = self._client_factory(api_key)
            else:
                from google import genai

                self._client = genai.Client(api_key=api_key)
            self._client_key = api_key
        return self._client

    def _default_output_path(self) -> Path:
        self.config.ensure_directories()
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        return self.config.videos_dir / f"fortune_{timestamp}.mp4"

    def _submit(self, client, prompt: str):
        from google.genai import types

        gemini = self.config.gemini
        logger.info(
            f"Using Veo model: {gemini.video_model} "
            f"({gemini.video_resolution}, {gemini.video_aspect_ratio})"
        )
        return client.models.generate_videos(
            model=gemini.video_model,
            prompt=prompt,
            config=types.GenerateVideosConfig(
                number_of_videos=1,
                resolution=gemini.video_resolution,
                aspect_ratio=gemini.video_aspect_ratio,
            ),
        )

    def _wait_for(
        self,
        client,
        operation,
        progress_callback: Optional[Callable[[str, float], None]] = None,
    ):
        """Poll the operation until done (can take 11s to 6 minutes)."""
        interval = self.config.polling.poll_interval
        max_polls = self.config.polling.max_polls

        poll_count = 0
        while not operation.done:
            poll_count += 1
            if poll_count > max_polls:
                raise TimeoutExceeded()

            self._sleep(interval)
            operation = client.operations.get(operation)

            # Stay between 0.2 and 0.85 while waiting
            progress = 0.2 + (0.65 * min(poll_count / max_polls, 1.0))
            if progress_callback:
                progress_callback(
                    f"Generating video... ({int(poll_count * interval)}s elapsed)",
                    progress,
                )
        return operation

    @staticmethod
    def _extract_uri(operation) -> Optional[str]:
        response = getattr(operation, "response", None)
        videos = getattr(response, "generated_videos", None) if response else None
        if not videos:
            return None
        video = getattr(videos[0], "video", None)
        return getattr(video, "uri", None) if video else None

    def _download(self, uri: str, api_key: str, output_path: Path) -> Path:
        try:
            response = self._http_get(
                uri,
                params={"key": api_key},
                timeout=self.config.polling.download_timeout,
            )
        except requests.RequestException as e:
            raise FetchFailure() from e

        if not response.ok:
            logger.error(f"Video download failed with HTTP {response.status_code}")
            raise FetchFailure()

        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(response.content)
        return output_path

    def generate(
        self,
        script: str,
        output_path: Optional[Path] = None,
        progress_callback: Optional[Callable[[str, float], None]] = None,
    ) -> Path:
        """
        Generate the background video for a fortune script.

        Args:
            script: The (edited) fortune script; only used to pick the motif
            output_path: Where to save the MP4 (defaults to output/videos/)
            progress_callback: Optional callback for progress updates

        Returns:
            Path to the downloaded video

        Raises:
            CredentialMissing: no API key is available
            CredentialInvalid: the API rejected the key
            TimeoutExceeded: the job did not finish within max_polls
            UriMissing: the job finished without a video
            FetchFailure: the video download failed
        """
        api_key = self.api_key_provider()
        if not api_key:
            raise CredentialMissing()

        client = self._get_client(api_key)
        prompt = build_video_prompt(script)

        if progress_callback:
            progress_callback("Submitting video job to Veo...", 0.1)

        try:
            operation = self._submit(client, prompt)

            if progress_callback:
                progress_callback("Waiting for Veo to generate video...", 0.2)

            operation = self._wait_for(client, operation, progress_callback)
        except TimeoutExceeded:
            raise
        except Exception as e:
            if is_invalid_key_error(e):
                raise CredentialInvalid() from e
            raise

        uri = self._extract_uri(operation)
        if not uri:
            logger.error("Veo returned no video in response")
            raise UriMissing()

        if progress_callback:
            progress_callback("Downloading generated video...", 0.9)

        path = self._download(uri, api_key, output_path or self._default_output_path())
        logger.info(f"Fortune video saved to: {path}")

        if progress_callback:
            progress_callback("Video complete!", 1.0)

        return path

