# Cliente Google Gemini para generación de SQL

import logging
from typing import Dict, Optional

from langchain_google_genai import ChatGoogleGenerativeAI

from adapters.outbound.llm.invocation import generate_with_llm
from core.domain.errors import ProviderError
from core.domain.query import SQLGenerationRequest, SQLGenerationResponse

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.0-flash"


class GeminiProvider:
    name = "gemini"

    def __init__(
        self,
        api_key: str,
        default_model: str = DEFAULT_MODEL,
        temperature: float = 0.1,
        max_tokens: int = 1024,
        timeout_s: float = 60.0,
    ):
        self._api_key = api_key
        # GEMINI_MODEL puede sobreescribir el default
        self.default_model = default_model or DEFAULT_MODEL
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout_s = timeout_s
        self._clients: Dict[str, ChatGoogleGenerativeAI] = {}

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    def _get_client(self, model: str) -> ChatGoogleGenerativeAI:
        if not self._api_key:
            raise ProviderError(self.name, "GEMINI_API_KEY environment variable is not set")

        client = self._clients.get(model)
        if client is None:
            client = ChatGoogleGenerativeAI(
                model=model,
                temperature=self.temperature,
                top_p=0.95,
                top_k=40,
                google_api_key=self._api_key,
                max_output_tokens=self.max_tokens,
            )
            self._clients[model] = client
            logger.info(f"LLM: Gemini ({model})")
        return client

    async def generate(
        self, request: SQLGenerationRequest, model_name: Optional[str] = None
    ) -> SQLGenerationResponse:
        model = model_name or self.default_model
        llm = self._get_client(model)
        return await generate_with_llm(
            llm, request, self.name, "Gemini", model, self.timeout_s
        )
