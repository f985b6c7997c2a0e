"""
Training loop for the intent classification head.

Implements:
- AdamW optimization with selective weight decay
- Mini-batch training over sentence embeddings
- Gradient clipping
- Progress reporting
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

import torch
import torch.nn as nn
from torch.optim import AdamW
from torch.utils.data import DataLoader, TensorDataset

from ..config import ClassifierConfig

logger = logging.getLogger(__name__)


@dataclass
class TrainingMetrics:
    """Metrics tracked during training."""
    epoch: int
    loss: float
    accuracy: float


class IntentTrainer:
    """
    Trainer for an intent classification head.

    Inputs are precomputed sentence embeddings, so an epoch is a handful of
    cheap matrix products; the loop stays on CPU.
    """

    def __init__(
        self,
        model: nn.Module,
        config: ClassifierConfig,
        max_grad_norm: float = 1.0,
    ):
        self.model = model
        self.config = config
        self.max_grad_norm = max_grad_norm
        self.loss_fn = nn.CrossEntropyLoss()
        self.optimizer = self._create_optimizer()

    def _create_optimizer(self) -> torch.optim.Optimizer:
        """Create AdamW optimizer, exempting biases from weight decay."""
        optimizer_grouped_parameters = [
            {
                "params": [
                    p for n, p in self.model.named_parameters()
                    if not n.endswith("bias") and p.requires_grad
                ],
                "weight_decay": self.config.weight_decay,
            },
            {
                "params": [
                    p for n, p in self.model.named_parameters()
                    if n.endswith("bias") and p.requires_grad
                ],
                "weight_decay": 0.0,
            },
        ]
        return AdamW(optimizer_grouped_parameters, lr=self.config.learning_rate)

    def train(
        self,
        features: torch.Tensor,
        labels: torch.Tensor,
        progress: Optional[Callable[[float], None]] = None,
    ) -> TrainingMetrics:
        """
        Run the complete training loop.

        Args:
            features: [N, input_dim] sentence embeddings
            labels: [N] label indices
            progress: Optional callback receiving completion in [0, 1]

        Returns:
            Metrics of the last epoch
        """
        generator = torch.Generator().manual_seed(self.config.seed)
        dataloader = DataLoader(
            TensorDataset(features, labels),
            batch_size=self.config.batch_size,
            shuffle=True,
            generator=generator,
        )

        logger.info(
            f"Training intent head for {self.config.num_epochs} epochs "
            f"on {len(features)} samples"
        )

        metrics = TrainingMetrics(epoch=0, loss=0.0, accuracy=0.0)
        for epoch in range(self.config.num_epochs):
            metrics = self._train_epoch(epoch, dataloader)
            if progress is not None:
                progress((epoch + 1) / self.config.num_epochs)

        logger.info(
            f"Finished training - Loss: {metrics.loss:.4f}, Accuracy: {metrics.accuracy:.4f}"
        )
        self.model.eval()
        return metrics

    def _train_epoch(self, epoch: int, dataloader: DataLoader) -> TrainingMetrics:
        """Train for one epoch."""
        self.model.train()
        total_loss = 0.0
        correct = 0
        seen = 0

        for batch_features, batch_labels in dataloader:
            self.optimizer.zero_grad()
            logits = self.model(batch_features)
            loss = self.loss_fn(logits, batch_labels)
            loss.backward()

            torch.nn.utils.clip_grad_norm_(self.model.parameters(), self.max_grad_norm)
            self.optimizer.step()

            total_loss += loss.item() * len(batch_labels)
            correct += (logits.argmax(dim=-1) == batch_labels).sum().item()
            seen += len(batch_labels)

        metrics = TrainingMetrics(
            epoch=epoch,
            loss=total_loss / max(seen, 1),
            accuracy=correct / max(seen, 1),
        )
        logger.debug(f"Epoch {epoch + 1} - Loss: {metrics.loss:.4f}")
        return metrics
