"""Schemas — pydantic models validating loosely-typed application input at the boundary."""
