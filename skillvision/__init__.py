"""SkillVision AI backend: future-skill recommendations from a student quiz."""

__version__ = "1.0.0"
