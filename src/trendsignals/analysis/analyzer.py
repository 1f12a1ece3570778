from .state import AnalyzerError, ModelConfig, RecommendationRequest, TradingRecommendation
from .prompts import analyzer_system_prompt, analyzer_content
from langchain_openai import ChatOpenAI
from langchain_core.messages import HumanMessage, SystemMessage
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable
import json
import logging
import tiktoken


logger = logging.getLogger(__name__)


@runtime_checkable
class TradingAnalyzer(Protocol):
    """Interface for decision functions mapping a request to a recommendation"""

    async def analyze_trading_decision(self, request: RecommendationRequest) -> Any:
        """Return a structured recommendation for the request"""
        ...


class LLMTradingAnalyzer:
    """
    Trading analyzer backed by an OpenAI chat model through LangChain.

    The model is asked for a structured TradingRecommendation built from the
    request's feature summary and asset symbol.
    """

    # USD per 1M tokens
    INPUT_TOKEN_COSTS = {
        "gpt-4.1-nano": 0.10,
        "gpt-4.1-mini": 0.40,
        "gpt-4.1": 2.00,
        "gpt-4o-mini": 0.15,
        "gpt-4o": 2.50,
    }
    OUTPUT_TOKEN_COSTS = {
        "gpt-4.1-nano": 0.40,
        "gpt-4.1-mini": 1.60,
        "gpt-4.1": 8.00,
        "gpt-4o-mini": 0.60,
        "gpt-4o": 10.00,
    }
    ESTIMATED_OUTPUT_TOKENS = 300

    def __init__(
        self,
        model_config: Optional[ModelConfig] = None,
        system_prompt: Optional[str] = None,
        content_template: Optional[str] = None,
        model: Optional[Any] = None
    ):
        """
        Initialize the trading analyzer.

        Args:
            model_config: Configuration for the LLM model
            system_prompt: System prompt (uses default if None)
            content_template: Template for the request content (uses default if None)
            model: Pre-built runnable returning TradingRecommendation (built from config if None)
        """
        self.model_config = model_config or ModelConfig()
        self.system_prompt = system_prompt or analyzer_system_prompt
        self.content_template = content_template or analyzer_content
        self.model = model if model is not None else self._initialize_model()
        self._encoding = None

        self.analysis_count = 0
        self.error_count = 0

        logger.info(f"Initialized LLMTradingAnalyzer with model: {self.model_config.model_name}")

    def _initialize_model(self):
        """Initialize the LLM with structured output support."""
        try:
            model = ChatOpenAI(
                model=self.model_config.model_name,
                temperature=self.model_config.temperature,
                max_tokens=self.model_config.max_tokens,
                timeout=self.model_config.timeout,
                max_retries=self.model_config.max_retries
            )
            return model.with_structured_output(TradingRecommendation)
        except Exception as e:
            logger.error(f"Failed to initialize model: {e}")
            raise AnalyzerError(f"Model initialization failed: {e}") from e

    async def analyze_trading_decision(self, request: RecommendationRequest) -> TradingRecommendation:
        """
        Ask the model for a trading recommendation.

        Args:
            request: Feature summary and asset symbol

        Returns:
            TradingRecommendation produced by the model
        """
        messages = self._build_messages(request)

        try:
            start_time = datetime.now()
            response = await self.model.ainvoke(messages)
            analysis_time = (datetime.now() - start_time).total_seconds()

            if not isinstance(response, TradingRecommendation):
                raise AnalyzerError(f"Invalid response type: {type(response)}")

            response = self._post_process(response, request)

            self.analysis_count += 1
            logger.debug(
                f"Analysis for {request.asset_symbol} completed in {analysis_time:.2f}s: "
                f"{response.action} (confidence {response.confidence})"
            )
            return response

        except Exception as e:
            self.error_count += 1
            logger.error(f"Analysis failed for {request.asset_symbol}: {e}")
            raise

    def _build_messages(self, request: RecommendationRequest) -> List[Any]:
        return [
            SystemMessage(content=self.system_prompt),
            HumanMessage(content=self._format_content(request))
        ]

    def _format_content(self, request: RecommendationRequest) -> str:
        return self.content_template.format(
            asset_symbol=request.asset_symbol,
            signals_json=json.dumps(request.feature_summary.to_scraper_payload(), indent=2, ensure_ascii=False)
        )

    @staticmethod
    def _post_process(response: TradingRecommendation, request: RecommendationRequest) -> TradingRecommendation:
        """Pin the symbol to the one that was asked for."""
        symbol = request.asset_symbol.replace('$', '').upper().strip()
        if response.symbol != symbol:
            response = response.model_copy(update={"symbol": symbol})
        return response

    @property
    def encoding(self):
        """Tokenizer for the configured model, loaded on first use"""
        if self._encoding is None:
            self._encoding = self._get_encoding()
        return self._encoding

    def _get_encoding(self):
        """Get the appropriate encoding for the model."""
        model_name = self.model_config.model_name

        if "gpt-4o" in model_name or "gpt-4.1" in model_name:
            return tiktoken.get_encoding("o200k_base")
        elif "gpt-4" in model_name:
            return tiktoken.encoding_for_model("gpt-4")
        else:
            return tiktoken.get_encoding("cl100k_base")

    def _lookup_cost(self, table: Dict[str, float]) -> float:
        # Longest key first so "gpt-4.1-mini" does not match "gpt-4.1"
        model_name = self.model_config.model_name
        for key in sorted(table, key=len, reverse=True):
            if key in model_name:
                return table[key]
        return 1.00

    def estimate_tokens(self, request: RecommendationRequest) -> Dict[str, Any]:
        """
        Estimate prompt tokens and cost for one analysis.

        Args:
            request: The request that would be sent

        Returns:
            Dictionary with token counts and a cost estimate
        """
        system_tokens = len(self.encoding.encode(self.system_prompt))
        content_tokens = len(self.encoding.encode(self._format_content(request)))
        input_tokens = system_tokens + content_tokens
        output_tokens = self.ESTIMATED_OUTPUT_TOKENS

        input_cost = (input_tokens / 1_000_000) * self._lookup_cost(self.INPUT_TOKEN_COSTS)
        output_cost = (output_tokens / 1_000_000) * self._lookup_cost(self.OUTPUT_TOKEN_COSTS)

        return {
            'asset_symbol': request.asset_symbol,
            'system_prompt_tokens': system_tokens,
            'content_tokens': content_tokens,
            'total_input_tokens': input_tokens,
            'estimated_output_tokens': output_tokens,
            'total_tokens': input_tokens + output_tokens,
            'cost_estimate': {
                'input_cost': f"${input_cost:.6f}",
                'output_cost': f"${output_cost:.6f}",
                'total_cost': f"${input_cost + output_cost:.6f}"
            }
        }

    def get_metrics(self) -> Dict[str, Any]:
        """Get analysis metrics."""
        return {
            'total_analyses': self.analysis_count,
            'total_errors': self.error_count,
            'success_rate': (
                self.analysis_count / (self.analysis_count + self.error_count)
                if (self.analysis_count + self.error_count) > 0
                else 0
            ),
            'model': self.model_config.model_name
        }
