"""
Worker pools for CPU-light, embarrassingly parallel scoring.

Workers:
- ParallelEvaluator: scores a candidate pool against one theta snapshot
"""

from .evaluator import ParallelEvaluator, Scorer

__all__ = ['ParallelEvaluator', 'Scorer']
