"""
Data structures representing the output of the conversion pipeline.

This module defines the `ConversionResult` Pydantic model, which encapsulates
the migrated code, any errors or warnings encountered, and the trace log.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ConversionResult(BaseModel):
  """
  Container for the results of one migration job.
  """

  code: str = Field(default="", description="The migrated source code.")
  path: Optional[str] = Field(default=None, description="Origin of the source unit, if known.")
  errors: List[str] = Field(default_factory=list, description="Errors and recipe warnings encountered.")
  success: bool = Field(
    default=True,
    description="False if the unit could not be parsed or strict mode rejected a warning.",
  )
  changed: bool = Field(default=False, description="True if the output differs from the input.")
  applied_recipes: List[str] = Field(default_factory=list, description="Recipes that modified the unit.")
  trace_events: List[Dict[str, Any]] = Field(default_factory=list, description="Execution trace log data.")

  @property
  def has_errors(self) -> bool:
    """
    Check if the result contains any error messages.

    Returns:
        True if one or more errors are present.
    """
    return len(self.errors) > 0
