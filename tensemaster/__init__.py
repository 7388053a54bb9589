"""
Tense Master - scoring, reward and achievement engine for a gamified
English-grammar course.

Packages:
- core: domain models, challenge modes, errors, store protocols
- content: built-in courses, achievement and shop catalogs
- engine: pure scoring/reward/progress/achievement functions
- session: quiz sessions, submission orchestration, notifications
- integrations / db: hosted REST backend and local SQL backend
- cli: typer + rich terminal front end
"""

__version__ = "1.0.0"
