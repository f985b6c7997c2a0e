"""
Configuration classes for the multi-language intent prediction system.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class SpellCheckConfig:
    """Configuration for vocabulary-based spelling correction."""
    enabled: bool = True
    min_token_length: int = 4  # Tokens shorter than this are never corrected
    max_edit_distance: Optional[int] = 2  # Nearest entry is ignored beyond this; None disables the cap


@dataclass
class ClassifierConfig:
    """Configuration for the reference intent classifier."""
    hidden_size: int = 64
    dropout: float = 0.1

    # Training hyperparameters
    learning_rate: float = 1e-2
    weight_decay: float = 0.01
    num_epochs: int = 60
    batch_size: int = 16

    # Reproducibility
    seed: int = 42


@dataclass
class EngineConfig:
    """Engine configuration."""
    engine_version: str = "1.0.0"
    vector_dim: int = 32
    model_cache_size: int = 8  # Maximum number of models resident at once


@dataclass
class OrchestratorConfig:
    """Language fallback configuration."""
    default_language: str = "en"
    anticipated_language: Optional[str] = None

    # Batch processing
    batch_size: int = 16


@dataclass
class StorageConfig:
    """Model storage configuration."""
    models_dir: str = "./models"


@dataclass
class Config:
    """Main configuration combining all sub-configs."""
    spellcheck: SpellCheckConfig = field(default_factory=SpellCheckConfig)
    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)
    engine: EngineConfig = field(default_factory=EngineConfig)
    orchestrator: OrchestratorConfig = field(default_factory=OrchestratorConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)

    @classmethod
    def from_yaml(cls, path: str) -> "Config":
        """Load configuration from YAML file."""
        import yaml
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}
        return cls(
            spellcheck=SpellCheckConfig(**data.get('spellcheck', {})),
            classifier=ClassifierConfig(**data.get('classifier', {})),
            engine=EngineConfig(**data.get('engine', {})),
            orchestrator=OrchestratorConfig(**data.get('orchestrator', {})),
            storage=StorageConfig(**data.get('storage', {})),
        )

    def to_yaml(self, path: str) -> None:
        """Save configuration to YAML file."""
        import yaml
        from dataclasses import asdict
        with open(path, 'w') as f:
            yaml.dump(asdict(self), f, default_flow_style=False)
