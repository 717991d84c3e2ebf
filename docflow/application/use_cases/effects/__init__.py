"""Outbox dispatch use case."""

from docflow.application.use_cases.effects.effect_dispatcher import EffectDispatcher

__all__ = ["EffectDispatcher"]
