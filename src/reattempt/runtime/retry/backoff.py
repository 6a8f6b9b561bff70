"""Backoff strategies for retry schedules.

Provides pluggable delay calculation between attempts:
- ExponentialBackoff: min_delay * factor^n, capped, optionally randomized
- ConstantBackoff: Fixed delay
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@runtime_checkable
class Backoff(Protocol):
    """Protocol for backoff delay calculation.
    
    Retry numbers are 0-indexed (delay before the first retry = retry 0).
    """
    
    def delay(self, retry: int) -> float:
        """Calculate delay in seconds before the given retry.
        
        Args:
            retry: 0-indexed retry number
            
        Returns:
            Delay in seconds before that retry
        """
        ...


@dataclass(frozen=True, slots=True)
class ExponentialBackoff:
    """Exponential backoff with optional randomization.
    
    Delay = min(rand * min_delay * factor^retry, max_delay), where rand is
    drawn from [1, 2) when ``randomize`` is set and is 1 otherwise.
    
    Attributes:
        min_delay: Delay before the first retry in seconds (default: 1.0)
        max_delay: Upper bound in seconds (default: unbounded)
        factor: Exponential growth factor (default: 2.0)
        randomize: Multiply each delay by a random 1-2x (default: False)
    """
    
    min_delay: float = 1.0
    max_delay: float = math.inf
    factor: float = 2.0
    randomize: bool = False
    
    def delay(self, retry: int) -> float:
        rand = random.uniform(1.0, 2.0) if self.randomize else 1.0
        return min(rand * max(self.min_delay, 0.0) * (self.factor ** retry), self.max_delay)


@dataclass(frozen=True, slots=True)
class ConstantBackoff:
    """Fixed delay between retries.
    
    Attributes:
        delay_seconds: Fixed delay in seconds (default: 1.0)
    """
    
    delay_seconds: float = 1.0
    
    def delay(self, retry: int) -> float:
        return self.delay_seconds
