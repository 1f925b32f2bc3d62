"""Busuanzi counting service integration."""

from src.infrastructure.busuanzi.client import BusuanziClient, BusuanziCounts
from src.infrastructure.busuanzi.counter_sync import BusuanziCounterSync

__all__ = ["BusuanziClient", "BusuanziCounts", "BusuanziCounterSync"]
