import requests
from typing import Any, Dict, List, Optional
import logging
import os
import sys

logger = logging.getLogger(__name__)

API_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = os.environ.get("GEMINI_MODEL", "gemini-2.0-flash")
DEFAULT_MAX_OUTPUT_TOKENS = int(os.environ.get("GEMINI_MAX_OUTPUT_TOKENS", "2048"))


class GeminiError(Exception):
    """Raised when the Gemini API call fails or returns no usable text."""


class Gemini:
    """
    A client for the Google Gemini text generation REST API.
    """
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
        proxy_url: Optional[str] = None,
        timeout: float = 60,
    ) -> None:
        self.api_key = api_key or os.environ.get("GOOGLE_API_KEY")
        self.model = model or DEFAULT_MODEL
        self.max_output_tokens = max_output_tokens
        self.timeout = timeout
        self.proxy_url = proxy_url or os.environ.get("PROXY_URL")

        self.session = requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

        if self.proxy_url:
            self.session.proxies = {
                "http": self.proxy_url,
                "https": self.proxy_url
            }
            logger.info(f"Using proxy for Gemini requests: {self.proxy_url}")

    @property
    def endpoint(self) -> str:
        return f"{API_BASE_URL}/models/{self.model}:generateContent"

    def _build_payload(self, prompt: str) -> Dict[str, Any]:
        return {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {"maxOutputTokens": self.max_output_tokens}
        }

    @staticmethod
    def _extract_text(data: Dict[str, Any]) -> str:
        candidates: List[Dict[str, Any]] = data.get("candidates") or []
        if not candidates:
            feedback = data.get("promptFeedback", {})
            raise GeminiError(f"No candidates in Gemini response (feedback: {feedback})")

        parts = candidates[0].get("content", {}).get("parts", [])
        text = "".join(part["text"] for part in parts if isinstance(part, dict) and "text" in part)
        if not text:
            reason = candidates[0].get("finishReason", "UNKNOWN")
            raise GeminiError(f"Empty Gemini response (finish reason: {reason})")
        return text

    def generate(self, prompt: str) -> str:
        """
        Send a single prompt and return the model's text reply.
        No retries: any failure surfaces as GeminiError or a requests exception.
        """
        if not self.api_key:
            raise GeminiError("GOOGLE_API_KEY is not set")

        logger.info(f"Calling Gemini model {self.model} ({len(prompt)} prompt chars)")
        resp = self.session.post(
            self.endpoint,
            headers={"x-goog-api-key": self.api_key},
            json=self._build_payload(prompt),
            timeout=self.timeout,
        )

        if resp.status_code != 200:
            raise GeminiError(f"Gemini request failed with status {resp.status_code}: {resp.text[:200]}")

        try:
            data = resp.json()
        except ValueError as e:
            raise GeminiError(f"Failed to decode Gemini response: {e}")

        return self._extract_text(data)

    def ask(self, query: str) -> str:
        print(f"\n[QUERY]: {query}")
        print(f"[MODEL]: {self.model}")
        print("-" * 60)
        answer = self.generate(query)
        print("[RESPONSE]")
        print(answer)
        print("=" * 60)
        return answer

if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser()
    parser.add_argument("query", nargs="?", default="Hello!")
    parser.add_argument("--api-key")
    parser.add_argument("--model")
    args = parser.parse_args()

    print("\n" + "="*60)
    print(" GEMINI CLIENT ".center(60, "="))
    print("="*60)

    try:
        client = Gemini(api_key=args.api_key, model=args.model)
        client.ask(args.query)
        print("Done.")
    except Exception as e:
        print(f"\n[!] Failed: {e}", file=sys.stderr)
        sys.exit(1)
