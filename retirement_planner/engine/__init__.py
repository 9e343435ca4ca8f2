"""Projection engine: tax rules, accumulation, drawdown and persistence."""
