"""Reversi Duel: rule engine and personality-driven search."""
