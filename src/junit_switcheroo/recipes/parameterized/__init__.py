"""
Parameterized runner recipe.

Collector -> planner -> rewriter for ``@RunWith(Parameterized.class)`` classes.
"""
