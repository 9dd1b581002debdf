"""Screenshot analysis using Gemini structured output.

The uploaded short-form screenshot goes to Gemini together with a fixed
Korean instruction prompt; the response is constrained to a JSON object with
seven required string fields and parsed into an AnalysisResult.
"""

import json
import logging
from io import BytesIO
from typing import Callable, Optional

from PIL import Image
from pydantic import ValidationError

from src.config import Config, config as default_config
from src.models.schemas import AnalysisResult
from src.services.errors import (
    CredentialInvalid,
    CredentialMissing,
    ParseFailure,
    is_invalid_key_error,
)

logger = logging.getLogger(__name__)


# The script template below is what the birth year extraction relies on
# ("NN년생" tokens), so keep the wording stable.
ANALYSIS_PROMPT = """
당신은 '대한민국 최고의 명리학 권위자'이자 '숏폼 전문 SEO 기획가'입니다.
이 쇼츠 스크린샷을 분석하여 다음 요소들을 반드시 '한국어'로 작성해줘:

1. suggestedTitle: SEO 클릭률을 극대화하는 15자 이내의 강렬한 제목.
2. hook: 시청자를 즉시 멈추게 하는 강력한 첫 문장.
3. visualStyle: 신비로운 우주 배경에 12지신 조각상이 움직이는 시각 전략.
4. pacing: 정보를 빠르게 전달하는 숏폼 리듬.
5. textOverlayStrategy: 캡컷에서 작업하기 좋은 자막 배치 전략.
6. engagementFactor: 구독과 좋아요를 유도하는 심리 기법.
7. suggestedFortuneScript:
   - [제목]: 분석된 내용을 바탕으로 한 강렬한 운세 제목 (제목부터 바로 시작).
   - [본문]: 2026년 대박나는 출생년도를 반드시 최소 25~30개 이상 상세히 나열.
   - [미션]: "화면 하단의 황금 영물을 2번 누르시면 복이 찾아옵니다."
   - [클로징]: "당신의 앞길에 만복이 깃들고 막혔던 재물운이 폭포수처럼 터지길 간절히 축원합니다. 복 많이 받으십시오. 친구에게 공유 좋아요 누르셨지요? 구독은 저에게 큰힘이 됩니다."
"""

# camelCase keys of the response schema, in prompt order
RESPONSE_FIELDS = [
    "suggestedTitle",
    "hook",
    "visualStyle",
    "pacing",
    "textOverlayStrategy",
    "engagementFactor",
    "suggestedFortuneScript",
]

# MIME types Gemini accepts for inline images
SUPPORTED_IMAGE_TYPES = {
    "image/png",
    "image/jpeg",
    "image/webp",
    "image/heic",
    "image/heif",
}


def parse_analysis(text: Optional[str]) -> AnalysisResult:
    """Parse the JSON text of a structured response.

    Raises:
        ParseFailure: on empty text, invalid JSON or missing fields
    """
    if not text or not text.strip():
        raise ParseFailure()

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.error(f"Analysis response is not valid JSON: {e}")
        raise ParseFailure() from e

    if not isinstance(data, dict):
        raise ParseFailure()

    try:
        return AnalysisResult.model_validate(data)
    except ValidationError as e:
        logger.error(f"Analysis response missing fields: {e}")
        raise ParseFailure() from e


class FortuneAnalyzer:
    """Turn a viral shorts screenshot into a fortune script with Gemini."""

    def __init__(
        self,
        api_key_provider: Callable[[], Optional[str]],
        config: Optional[Config] = None,
        client_factory: Optional[Callable[[str], object]] = None,
    ):
        self.config = config or default_config
        self.api_key_provider = api_key_provider
        self._client_factory = client_factory
        self._client = None
        self._client_key = None

    def _get_client(self, api_key: str):
        """Lazy load Gemini client, rebuilt when the key changes."""
        if self._client is None or self._client_key != api_key:
            if self._client_factory is not None:
                self._client = self._client_factory(api_key)
            else:
                from google import genai

                self._client = genai.Client(api_key=api_key)
            self._client_key = api_key
        return self._client

    def _prepare_image(self, image_bytes: bytes, mime_type: str) -> tuple[bytes, str]:
        """Re-encode images Gemini can't take inline (gif, bmp, ...) as PNG."""
        if mime_type in SUPPORTED_IMAGE_TYPES:
            return image_bytes, mime_type

        pil_image = Image.open(BytesIO(image_bytes))
        if pil_image.mode not in ("RGB", "RGBA"):
            pil_image = pil_image.convert("RGBA")
        buffer = BytesIO()
        pil_image.save(buffer, format="PNG")
        logger.info(f"Converted {mime_type} upload to PNG for analysis")
        return buffer.getvalue(), "image/png"

    def _build_config(self):
        from google.genai import types

        return types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=types.Schema(
                type=types.Type.OBJECT,
                properties={
                    name: types.Schema(type=types.Type.STRING)
                    for name in RESPONSE_FIELDS
                },
                required=list(RESPONSE_FIELDS),
            ),
        )

    def analyze(
        self,
        image_bytes: bytes,
        mime_type: str = "image/png",
        progress_callback: Optional[Callable[[str, float], None]] = None,
    ) -> AnalysisResult:
        """
        Analyze a screenshot and draft the fortune script.

        Args:
            image_bytes: Raw bytes of the uploaded image
            mime_type: Declared MIME type of the upload
            progress_callback: Optional callback for progress updates

        Returns:
            The parsed AnalysisResult

        Raises:
            CredentialMissing: no API key is available
            CredentialInvalid: the API rejected the key
            ParseFailure: the response was empty or malformed
        """
        from google.genai import types

        api_key = self.api_key_provider()
        if not api_key:
            raise CredentialMissing()

        if progress_callback:
            progress_callback("Preparing screenshot...", 0.1)

        data, mime = self._prepare_image(image_bytes, mime_type)
        client = self._get_client(api_key)

        model_id = self.config.gemini.analysis_model
        logger.info(f"Analyzing screenshot with {model_id} ({len(data)} bytes, {mime})")

        if progress_callback:
            progress_callback("Asking Gemini for a fortune script...", 0.3)

        try:
            response = client.models.generate_content(
                model=model_id,
                contents=[
                    types.Part.from_bytes(data=data, mime_type=mime),
                    ANALYSIS_PROMPT,
                ],
                config=self._build_config(),
            )
        except Exception as e:
            if is_invalid_key_error(e):
                raise CredentialInvalid() from e
            raise

        if progress_callback:
            progress_callback("Parsing analysis...", 0.9)

        result = parse_analysis(getattr(response, "text", None))
        logger.info(f"Analysis complete: '{result.suggested_title}'")

        if progress_callback:
            progress_callback("Analysis complete!", 1.0)

        return result
