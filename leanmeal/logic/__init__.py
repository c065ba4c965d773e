"""Core business logic layer.

Subpackages:
- composer: building a single meal from the nutrition table
- planning: multi-day plans from generated meals and registered menus
- reporting: nutrition totals and plan summaries
"""
__all__ = ["composer", "planning", "reporting"]
