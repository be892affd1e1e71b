"""
Learning bounded context - Application layer.

Use cases for progression, quizzes, the XP ledger, badges, challenges,
content configuration and the learner progress query.
"""
