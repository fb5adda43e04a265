"""
Expected-exception recipe.

Replaces ``ExpectedException`` rules with ``assertThrows``.
"""
