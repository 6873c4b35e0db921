"""
Feature modules for gpxkit.

Each feature is a self-contained module with:
- models.py - Dataclass models
- reader.py / writer.py - Wire codec
- service.py - Entry points
- analytics.py - Calculation logic (optional)
"""
