"""
Registrar: In-Memory Academic Records Core

Tracks departments, courses, professors, students and enrollments,
enforces referential and uniqueness invariants across them, and computes
grade-point metrics from raw grade scales.

Layers:
- domain: entities, grading engine, exceptions
- store: authoritative keyed record store
- managers: generic create/read/update contract per entity kind
"""

import logging

__version__ = "1.0.0"
__description__ = "In-memory academic records store with grading engine"

# Silent until the host configures logging or calls configure_logging()
logging.getLogger(__name__).addHandler(logging.NullHandler())
