import os
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .analysis.state import CollectionConfig, FeatureConfig, ModelConfig

logger = logging.getLogger(__name__)


@dataclass
class PipelineConfig:
    """Settings for one trend pipeline"""
    model: ModelConfig = field(default_factory=ModelConfig)
    collection: CollectionConfig = field(default_factory=CollectionConfig)
    features: FeatureConfig = field(default_factory=FeatureConfig)


def _optional_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return None
    return int(value)


class PipelineConfigFactory:
    """Factory for creating pipeline configuration objects"""

    @staticmethod
    def from_environment(env_path: Optional[Path] = None) -> PipelineConfig:
        """
        Load pipeline configuration from environment variables

        Args:
            env_path: Path to .env file (optional, ./.env is used if present)

        Returns:
            PipelineConfig object

        Raises:
            ValueError: If a variable holds an invalid value
        """
        if env_path:
            load_dotenv(dotenv_path=env_path)
        else:
            load_dotenv()

        model = ModelConfig(
            model_name=os.getenv("TRENDSIGNALS_MODEL", "gpt-4.1-mini"),
            temperature=float(os.getenv("TRENDSIGNALS_TEMPERATURE", "0.0")),
            max_tokens=_optional_int("TRENDSIGNALS_MAX_TOKENS"),
            timeout=_optional_int("TRENDSIGNALS_TIMEOUT") or 30,
            max_retries=int(os.getenv("TRENDSIGNALS_MAX_RETRIES", "2"))
        )
        collection = CollectionConfig(
            default_max_posts=int(os.getenv("TRENDSIGNALS_DEFAULT_MAX_POSTS", "50"))
        )

        logger.debug(f"Loaded pipeline config: model={model.model_name}, "
                     f"default_max_posts={collection.default_max_posts}")
        return PipelineConfig(model=model, collection=collection)
