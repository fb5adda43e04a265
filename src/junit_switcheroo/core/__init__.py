"""
Core Package.

Contains the migration machinery shared by all recipes:
- Immutable Java tree model and traversal
- Annotation matching and usage scanners
- Synthesis, formatting and import maintenance
- The migration engine, batch runner and tracing
"""
