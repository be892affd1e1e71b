"""
Domain layer.

Pure learning and gamification rules. Nothing here touches the database,
the web framework or the clock; callers pass in the current time.

This layer contains:
- Entities and Aggregate Roots: modules, progress, attempts, badges, challenges
- Value Objects: ids, reward tiers, unlock conditions
- Domain Services: scoring arithmetic
"""
