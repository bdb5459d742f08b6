"""Variant classification and dispatch over validated tagged unions."""

from shapeguard.dispatch.classifier import classify, narrow
from shapeguard.dispatch.dispatcher import VariantDispatcher

__all__ = ["classify", "narrow", "VariantDispatcher"]
