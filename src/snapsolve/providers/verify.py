"""Live API key checks.

Each check lists the provider's models, which is the cheapest authenticated
call both SDKs offer. The throwaway SDK clients are closed afterwards.
"""

import logging

from google import genai
from google.genai import errors as genai_errors
import openai

from snapsolve.constants import REQUEST_TIMEOUT
from snapsolve.core.types import ProviderKind

from .base import KeyCheck

log = logging.getLogger(__name__)


async def _check_openai(api_key: str) -> KeyCheck:
    client = openai.AsyncOpenAI(api_key=api_key, timeout=REQUEST_TIMEOUT, max_retries=0)
    try:
        await client.models.list()
    except openai.AuthenticationError:
        return KeyCheck(False, "Invalid API key. Please check your key and try again.")
    except openai.RateLimitError:
        return KeyCheck(
            False, "Rate limit exceeded or the account has insufficient quota."
        )
    except openai.APIError as e:
        return KeyCheck(False, f"OpenAI API error: {e}")
    finally:
        await client.close()
    return KeyCheck(True)


async def _check_gemini(api_key: str) -> KeyCheck:
    client = genai.Client(api_key=api_key)
    try:
        await client.aio.models.list(config={"page_size": 1})
    except genai_errors.ClientError as e:
        if e.code == 429:
            return KeyCheck(False, "Rate limit exceeded. Please try again later.")
        return KeyCheck(False, "Invalid API key. Please check your key and try again.")
    except genai_errors.APIError as e:
        return KeyCheck(False, f"Gemini API error: {e}")
    finally:
        await client.aio.aclose()
    return KeyCheck(True)


_CHECKS = {
    ProviderKind.OPENAI: _check_openai,
    ProviderKind.GEMINI: _check_gemini,
}


async def verify_api_key(provider: ProviderKind | str, api_key: str) -> KeyCheck:
    """Check ``api_key`` against ``provider``. Never raises for API errors."""
    if not api_key or not api_key.strip():
        return KeyCheck(False, "API key is empty.")
    kind = ProviderKind(provider)
    result = await _CHECKS[kind](api_key.strip())
    log.info("API key check for %s: %s", kind, "valid" if result.valid else "invalid")
    return result
